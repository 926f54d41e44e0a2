"""
Playback state models

Defines the per-engine session state, the status machine values, and the
read-only snapshot handed to caller hooks.
"""

import math
from enum import Enum
from dataclasses import dataclass, field
from typing import List, Tuple


class PlaybackStatus(Enum):
    """
    States of the playback machine

    idle     → typing    (write)
    typing   → paused    (pause)
    paused   → typing    (resume)
    typing   → skipping  (skip)
    any      → idle      (finish or abort)
    """
    IDLE = "idle"
    TYPING = "typing"
    PAUSED = "paused"
    SKIPPING = "skipping"


class SuspensionKind(Enum):
    """Reason a suspension is outstanding in the scheduler slot"""
    PACING = "pacing"        # wait between two literal tokens
    DELAY = "delay"          # [@delay:N]
    EXTERNAL = "external"    # awaitable returned by a caller function


@dataclass(frozen=True)
class Progress:
    """
    Fraction of tokens consumed in the current session

    Attributes:
        raw: Fraction in [0, 1]
        percent: Rounded percentage string, e.g. "42%"
    """
    raw: float
    percent: str

    @classmethod
    def progress_compute(cls, cursor: int, total: int) -> "Progress":
        """
        Compute progress from a cursor position.

        Example:
            >>> Progress.progress_compute(1, 8)
            Progress(raw=0.125, percent='13%')
        """
        raw = cursor / total if total else 0.0
        return cls(raw=raw, percent=f"{math.floor(raw * 100 + 0.5)}%")


@dataclass(frozen=True)
class PlaybackSnapshot:
    """
    Read-only view of a session, passed to start/typing/finish hooks

    Attributes:
        tokens: Full current token sequence
        cursor: Index of the next token to consume
        progress: Consumed fraction and percentage
    """
    tokens: Tuple[str, ...]
    cursor: int
    progress: Progress


@dataclass
class PlaybackState:
    """
    Mutable session state owned by exactly one engine.

    Attributes:
        tokens: Token buffer; directives may insert new tokens after cursor
        cursor: Index into tokens, always within [0, len(tokens)]
        status: Current machine state
        speed: Time units between literal tokens
        executions: Consecutive loop steps without literal output
        session: Generation counter, bumped by write and skip so that a
                 loop coroutine from an older generation stops after resuming
        aborted: True when the last session ended without finishing
    """
    tokens: List[str] = field(default_factory=list)
    cursor: int = 0
    status: PlaybackStatus = PlaybackStatus.IDLE
    speed: float = 25
    executions: int = 0
    session: int = 0
    aborted: bool = False

    def reset(self) -> None:
        """Clear tokens, cursor and loop guard; speed and status are kept"""
        self.tokens = []
        self.cursor = 0
        self.executions = 0

    def token_current(self) -> str:
        return self.tokens[self.cursor]

    def tokens_insert(self, tokens: List[str]) -> None:
        """Insert tokens immediately after the cursor"""
        position = self.cursor + 1
        self.tokens[position:position] = tokens

    @property
    def exhausted(self) -> bool:
        return self.cursor >= len(self.tokens)

    def snapshot(self) -> PlaybackSnapshot:
        return PlaybackSnapshot(
            tokens=tuple(self.tokens),
            cursor=self.cursor,
            progress=Progress.progress_compute(self.cursor, len(self.tokens)),
        )
