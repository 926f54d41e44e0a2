"""
Parser-specific data models

Type-safe structures for tokenizer and directive grammar return values.
"""

from dataclasses import dataclass
from typing import Optional

from .directives import DirectiveType


@dataclass(frozen=True)
class Directive:
    """
    Directive as written in the source text

    Returned by directive_parse() for a ``[@type:value]`` token.

    Attributes:
        type: Trimmed text before the first colon (a built-in or alias name)
        value: Trimmed text after the first colon, "" when absent

    Example:
        For token "[@run: log('a:b') ]":
        Directive(type="run", value="log('a:b')")
    """
    type: str
    value: str = ""


@dataclass(frozen=True)
class ResolvedDirective:
    """
    Directive after alias resolution, ready for dispatch

    Attributes:
        type: Built-in directive type
        value: Directive value, rewritten to "fn(value)" for aliases
        alias: Name of the alias that produced it, if any
    """
    type: DirectiveType
    value: str
    alias: Optional[str] = None


@dataclass(frozen=True)
class FunctionCall:
    """
    Result of unwrapping a ``name(param)`` directive value

    Attributes:
        name: Function name to look up in the context store
        param: Single parameter with surrounding quotes removed, or None

    Example:
        For value "greet('Reza')":
        FunctionCall(name="greet", param="Reza")

        For value "tick":
        FunctionCall(name="tick", param=None)
    """
    name: str
    param: Optional[str] = None


@dataclass(frozen=True)
class UnclosedDirective:
    """
    An ``[@`` opening without a closing bracket

    Attributes:
        snippet: Start of the directive content, truncated with "..."
    """
    snippet: str

    def __str__(self) -> str:
        return f"[@{self.snippet}"
