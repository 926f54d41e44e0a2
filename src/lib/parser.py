"""
Directive grammar for typewright

Parses ``[@type:value]`` tokens, rewrites aliases to built-in directives,
unwraps ``name(param)`` function calls and renders values for injection.
"""

import re
from typing import Any, Optional, TYPE_CHECKING

from ..models.directives import DirectiveType
from ..models.parser import Directive, ResolvedDirective, FunctionCall

if TYPE_CHECKING:
    from .context import ContextStore


FUNCTION_CALL_PATTERN = re.compile(r'^(\w+)\((.*)\)$')
PARAM_QUOTES_PATTERN = re.compile(r'^["\']|["\']$')
DIRECTIVE_MARKER_PATTERN = re.compile(r'\[@([^\]]+)\]')


def directive_parse(token: Any) -> Directive:
    """
    Parse a directive token into type and value

    Only the first colon separates type from value; later colons belong
    to the value.

    Args:
        token: Directive token including the "[@" and "]" delimiters

    Returns:
        Directive with trimmed type and value

    Example:
        >>> directive_parse("[@ run : log('a:b') ]")
        Directive(type='run', value="log('a:b')")
        >>> directive_parse("[@pause]")
        Directive(type='pause', value='')
    """
    if not token or not isinstance(token, str):
        return Directive(type="", value="")

    content = token[2:-1]
    directive_type, sep, value = content.partition(':')
    if not sep:
        return Directive(type=content.strip(), value="")

    return Directive(type=directive_type.strip(), value=value.strip())


def alias_resolve(directive: Directive, context: "ContextStore") -> Optional[ResolvedDirective]:
    """
    Resolve a parsed directive to a built-in directive type

    Aliases take precedence: ``[@name:X]`` becomes ``kind`` with value
    ``function_name(X)``, or ``function_name()`` when X is empty.

    Args:
        directive: Parsed directive
        context: Store holding registered aliases

    Returns:
        ResolvedDirective, or None when the type is neither an alias nor built-in
    """
    alias = context.alias_get(directive.type)
    if alias is not None:
        value = f"{alias.function_name}({directive.value})" if directive.value else f"{alias.function_name}()"
        return ResolvedDirective(type=alias.kind.directive, value=value, alias=alias.name)

    try:
        directive_type = DirectiveType(directive.type)
    except ValueError:
        return None

    return ResolvedDirective(type=directive_type, value=directive.value)


def functionCall_unwrap(value: str) -> FunctionCall:
    """
    Split a directive value into function name and single parameter

    One leading and one trailing quote are stripped from the parameter.
    Values that do not look like ``name(...)`` are bare function names.

    Example:
        >>> functionCall_unwrap("greet('Reza')")
        FunctionCall(name='greet', param='Reza')
        >>> functionCall_unwrap("greet()")
        FunctionCall(name='greet', param=None)
        >>> functionCall_unwrap("tick")
        FunctionCall(name='tick', param=None)
    """
    match = FUNCTION_CALL_PATTERN.match(value)
    if not match:
        return FunctionCall(name=value, param=None)

    name, raw_param = match.groups()
    param = PARAM_QUOTES_PATTERN.sub('', raw_param) if raw_param else None
    return FunctionCall(name=name, param=param)


def directiveMarkers_strip(text: str) -> str:
    """
    Unwrap ``[@...]`` markers to their inner content

    Example:
        >>> directiveMarkers_strip("say [@delay:10] now")
        'say delay:10 now'
    """
    return DIRECTIVE_MARKER_PATTERN.sub(r'\1', text)


def value_render(value: Any) -> str:
    """
    Render a variable or function result as text for injection

    None renders as an empty string; other non-strings go through str().
    Embedded directive markers are unwrapped so they are typed, not run.
    """
    if value is None:
        return ""
    return directiveMarkers_strip(value if isinstance(value, str) else str(value))
