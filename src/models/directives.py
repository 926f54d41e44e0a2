"""
Directive specification and metadata models

Defines the closed set of built-in directive types, the alias rewrite rule,
and the DirectiveSpec used by the dispatch registry.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List, Set


class DirectiveType(Enum):
    """
    Built-in directive types

    Every directive, including aliases once resolved, dispatches to exactly
    one of these.
    """
    SPEED = "speed"    # [@speed:50]
    DELAY = "delay"    # [@delay:1000]
    VAR = "var"        # [@var:name]
    RUN = "run"        # [@run:log('hi')]
    ASYNC = "async"    # [@async:fetch(url)]
    EVAL = "eval"      # [@eval:now()]


class DirectiveCategory(Enum):
    """
    Categories of directives

    Used for organization and documentation of the registry.
    """
    PACING = "pacing"            # speed, delay
    CONTENT = "content"          # var, eval
    INVOCATION = "invocation"    # run, async


class AliasKind(Enum):
    """Directive types an alias may rewrite to"""
    RUN = "run"
    ASYNC = "async"
    EVAL = "eval"

    @property
    def directive(self) -> DirectiveType:
        return DirectiveType(self.value)


@dataclass(frozen=True)
class AliasSpec:
    """
    Caller-defined rewrite rule

    ``[@name:X]`` behaves as ``[@kind:function_name(X)]``, or
    ``[@kind:function_name()]`` when X is empty.

    Attributes:
        name: Alias directive name
        function_name: Registered function the alias calls
        kind: How the function is invoked
    """
    name: str
    function_name: str
    kind: AliasKind = AliasKind.RUN


@dataclass
class DirectiveSpec:
    """
    Specification for a built-in directive

    Attributes:
        type: Directive type handled
        category: Category for organization
        description: Human-readable description
        handler: Coroutine function (directive, engine) -> None
        suspends: Whether the directive waits; suspending directives are
                  dropped entirely when playback is skipped
        examples: Example usage strings
    """
    type: DirectiveType
    category: DirectiveCategory
    description: str
    handler: Callable
    suspends: bool = False
    examples: List[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.type.value


# Names that may never be registered as aliases
RESERVED_DIRECTIVES: Set[str] = {member.value for member in DirectiveType}


def reserved_is(directive_name: str) -> bool:
    """Check if a directive name is reserved"""
    return directive_name in RESERVED_DIRECTIVES
