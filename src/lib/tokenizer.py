"""
Tokenizer for typewright source text

Splits text into the atomic units the engine types one at a time:
directives, markup tags, entities, surrogate pairs and single characters.
"""

import re
from typing import Any, List

from ..config import appsettings
from ..models.parser import UnclosedDirective
from .log import LOG, WARN


# First match wins, scanned left to right
TOKEN_PATTERN = re.compile(
    r'\[@[^\]]+\]'                      # directive   [@type:value]
    r'|<[^>]+>'                         # markup tag  <b>
    r'|&[^;]+;'                         # entity      &amp;
    r'|[\ud800-\udbff][\udc00-\udfff]'  # surrogate pair kept as one glyph
    r'|.',                              # any single unit
    re.DOTALL,
)

DIRECTIVE_OPEN = '[@'
DIRECTIVE_PATTERN = re.compile(r'\[@[^\]]+\]')


def directive_is(token: str) -> bool:
    """Check if a token is a directive token"""
    return token.startswith(DIRECTIVE_OPEN)


def unclosedDirectives_find(text: str) -> List[UnclosedDirective]:
    """
    Find ``[@`` openings that are never closed

    Only runs the per-opening scan when there are more openings than
    well-formed directives.

    Args:
        text: Source text

    Returns:
        One UnclosedDirective per opening without a later "]"

    Example:
        >>> unclosedDirectives_find("Hi [@delay:100")
        [UnclosedDirective(snippet='delay:100')]
    """
    opened = text.count(DIRECTIVE_OPEN)
    closed = len(DIRECTIVE_PATTERN.findall(text))
    if opened <= closed:
        return []

    limit = appsettings.snippet_length
    unclosed = []
    for part in text.split(DIRECTIVE_OPEN)[1:]:
        if ']' in part:
            continue
        ellipsis = '...' if len(part) > limit else ''
        unclosed.append(UnclosedDirective(snippet=part[:limit] + ellipsis))
    return unclosed


def tokenize(text: Any) -> List[str]:
    """
    Split text into tokens

    Unclosed directives are reported and then typed as plain characters.

    Args:
        text: Source text; anything that is not a str yields no tokens

    Returns:
        Tokens whose concatenation is the original text

    Example:
        >>> tokenize("Hi<br>[@speed:5]&amp;")
        ['H', 'i', '<br>', '[@speed:5]', '&amp;']
    """
    if not isinstance(text, str):
        return []

    for unclosed in unclosedDirectives_find(text):
        WARN(f'Detected an unclosed directive near "{unclosed}".')

    tokens = TOKEN_PATTERN.findall(text)
    LOG(f"Tokenized {len(text)} characters into {len(tokens)} tokens", level=3)
    return tokens


def directivesOnly_is(text: Any) -> bool:
    """
    Check if text consists of directives and nothing else

    Example:
        >>> directivesOnly_is("[@delay:1000][@speed:50]")
        True
        >>> directivesOnly_is("Hello [@delay:1000]")
        False
    """
    if not isinstance(text, str) or not text.strip():
        return False

    tokens = tokenize(text)
    if not tokens:
        return False

    return all(directive_is(token) for token in tokens)
