"""
Models package for typewright

Contains data structures and type definitions for tokenizing, directive
dispatch and playback.
"""

from .state import ProgramState, pipeline
from .directives import (
    AliasKind,
    AliasSpec,
    DirectiveCategory,
    DirectiveSpec,
    DirectiveType,
    RESERVED_DIRECTIVES,
)
from .parser import Directive, ResolvedDirective, FunctionCall, UnclosedDirective
from .playback import (
    PlaybackSnapshot,
    PlaybackState,
    PlaybackStatus,
    Progress,
    SuspensionKind,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "AliasKind",
    "AliasSpec",
    "DirectiveCategory",
    "DirectiveSpec",
    "DirectiveType",
    "RESERVED_DIRECTIVES",
    "Directive",
    "ResolvedDirective",
    "FunctionCall",
    "UnclosedDirective",
    "PlaybackSnapshot",
    "PlaybackState",
    "PlaybackStatus",
    "Progress",
    "SuspensionKind",
]
