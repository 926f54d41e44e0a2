"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional CLI pipeline and the
pipeline() helper for composing stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, outputFile,
          speed, var, skip, showSource
        - env_check: inputSourceFile, transcriptFile, envOK
        - source_read: sourceText
        - source_play: playResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source text file
        outputdir: Base output directory for the transcript
        verbosity: Logging verbosity level (1-3)
        inputFile: Input text filename (relative to inputdir)
        outputFile: Transcript filename (relative to outputdir)
        speed: Initial typing speed in time units, None for the default
        var: Variable assignments as "key=value" strings
        skip: Skip to the end as soon as playback starts
        showSource: Print the highlighted source before playing it
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the input file
        transcriptFile: Resolved path of the transcript to write
        sourceText: Contents of the input file
        playResult: Playback results (status, characters, aborted)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    outputFile: str = field(default="")
    speed: Optional[float] = field(default=None)
    var: Optional[List[str]] = field(default=None)
    skip: bool = field(default=False)
    showSource: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    transcriptFile: Path = field(default=Path("/"))
    sourceText: str = field(default="")
    playResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments
            inputdir: Directory containing source files
            outputdir: Directory for the transcript

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Only keep options that are ProgramState fields
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}

        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)

    def variables_parse(self) -> Dict[str, str]:
        """
        Split "key=value" assignments into a dict.

        Raises:
            ValueError: If an assignment has no "=" or an empty key

        Example:
            >>> ProgramState(var=["name=Reza", "greeting=hi=there"]).variables_parse()
            {'name': 'Reza', 'greeting': 'hi=there'}
        """
        variables: Dict[str, str] = {}
        for assignment in self.var or []:
            key, sep, value = assignment.partition("=")
            if not sep or not key.strip():
                raise ValueError(f"Invalid variable assignment '{assignment}', expected key=value")
            variables[key.strip()] = value
        return variables


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_read,
            source_play,
            results_report
        )

    This is equivalent to:
        results_report(source_play(source_read(env_check(initial_state))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
