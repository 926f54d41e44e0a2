#!/usr/bin/env python3
"""
typewright - Incremental typing engine with an embedded directive language

Plays a text file onto the terminal one character at a time, running the
[@type:value] directives it contains, and saves what was typed as a
transcript.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Directives:
    [@speed:N]      Time units between characters
    [@delay:N]      Wait N time units
    [@var:name]     Type the value of a variable (see --var)
    [@run:fn(x)]    Call a registered function
    [@async:fn(x)]  Call a registered function and wait for it
    [@eval:fn(x)]   Type what a registered function returns

Usage:
    typewright inputdir/ outputdir/ --inputFile intro.txt

Examples:
    # Basic playback
    typewright . output/ --inputFile intro.txt

    # Faster, with variables
    typewright . output/ --inputFile intro.txt --speed 10 --var name=Reza

    # Jump to the end immediately, showing the highlighted source first
    typewright . output/ --inputFile intro.txt --skip --showSource -vv
"""

import sys
import asyncio
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter, RawDescriptionHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import Typewriter, StreamSurface, ConfigurationError, __version__, LOG, state_connectToLogger
from .lib.directives import DirectiveRegistry
from .lib.lexer import source_highlight
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
  _                               _       _     _
 | |_ _   _ _ __   _____      ___ __(_) __ _| |__ | |_
 | __| | | | '_ \ / _ \ \ /\ / / '__| |/ _` | '_ \| __|
 | |_| |_| | |_) |  __/\ V  V /| |  | | (_| | | | | |_
  \__|\__, | .__/ \___| \_/\_/ |_|  |_|\__, |_| |_|\__|
      |___/|_|                         |___/

  Incremental typing with embedded directives
"""


class HelpFormatter(ArgumentDefaultsHelpFormatter, RawDescriptionHelpFormatter):
    """Show option defaults and keep the directive table as written"""


# Define CLI arguments
parser = ArgumentParser(
    description="typewright - type text onto the terminal with embedded directives",
    epilog="directives:\n" + DirectiveRegistry().directives_describe(),
    formatter_class=HelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input text file (relative to inputdir)"
)

parser.add_argument(
    "--outputFile",
    default=appsettings.transcript_name,
    type=str,
    help="Transcript filename (relative to outputdir)",
)

parser.add_argument(
    "--speed",
    default=None,
    type=float,
    help="Initial time units between characters (defaults to TYPEWRIGHT_DEFAULT_SPEED)",
)

parser.add_argument(
    "--var",
    action="append",
    default=None,
    type=str,
    help="Variable for [@var:key] directives as key=value (can be repeated)",
)

parser.add_argument(
    "--skip",
    action="store_true",
    default=False,
    help="Skip to the end as soon as playback starts",
)

parser.add_argument(
    "--showSource",
    action="store_true",
    default=False,
    help="Print the syntax-highlighted source before playing it",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input file
            - transcriptFile: Path the transcript will be written to
            - envOK: True if environment is valid

    Exits:
        1 if the input file is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    state.transcriptFile = state.outputdir / (state.outputFile or appsettings.transcript_name)
    LOG(f"Transcript: {state.transcriptFile}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the source text to play.

    Returns:
        ProgramState with added field:
            - sourceText: Contents of the input file

    Exits:
        1 if the file cannot be read
    """

    state = inputstate.copy()

    LOG("Reading source file...", level=1)

    try:
        state.sourceText = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(state.sourceText)} characters from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    if state.showSource:
        print(source_highlight(state.sourceText), file=sys.stderr)

    return state


async def playback_run(state: ProgramState, surface: StreamSurface) -> Typewriter:
    """Type the source onto the surface and wait for the session to end"""
    typewriter = Typewriter(surface, speed=state.speed)
    for key, value in state.variables_parse().items():
        typewriter.variable_set(key, value)

    typewriter.write(state.sourceText)
    if state.skip:
        typewriter.skip()
    await typewriter.join()
    return typewriter


def source_play(inputstate: ProgramState) -> ProgramState:
    """
    Play the source text onto stdout and save the transcript.

    Returns:
        ProgramState with added field:
            - playResult: Dict containing:
                - status: bool (session finished)
                - aborted: bool (session stopped early)
                - characters: int (characters typed)
                - transcript: str (path of the saved transcript)

    Exits:
        1 if the options are invalid
    """

    state = inputstate.copy()

    LOG("Playing source...", level=1)

    surface = StreamSurface(sys.stdout)
    try:
        typewriter = asyncio.run(playback_run(state, surface))
    except (ConfigurationError, ValueError) as e:
        print(f"Playback error: {e}", file=sys.stderr)
        sys.exit(1)
    print(file=sys.stdout)

    state.transcriptFile.write_text(surface.text, encoding="utf-8")
    LOG(f"Wrote {state.transcriptFile}", level=2)

    state.playResult = {
        "status": not typewriter.aborted,
        "aborted": typewriter.aborted,
        "characters": len(surface.text),
        "transcript": str(state.transcriptFile),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display playback results to the user.

    Exits:
        1 if playResult is None or the session was aborted
    """
    state: ProgramState = inputstate.copy()
    if not state.playResult:
        print("Error: Playback failed", file=sys.stderr)
        sys.exit(1)

    if state.playResult["aborted"]:
        print("Error: Playback aborted before the end of the text", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Playback complete!", level=1)
    LOG(f"  Characters: {state.playResult['characters']}", level=1)
    LOG(f"  Transcript: {state.playResult['transcript']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="typewright - Incremental typing with embedded directives",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - play a text file and save its transcript.

    Orchestrates the full pipeline:
        1. env_check: Validate paths and environment
        2. source_read: Read the input file
        3. source_play: Type it onto the terminal
        4. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_read, source_play, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
