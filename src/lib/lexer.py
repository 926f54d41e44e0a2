"""
Custom Pygments lexer for typewright syntax highlighting

Provides syntax highlighting for [@type:value] markup when previewing
source text on the terminal.

Token types:
- Keyword: Built-in directive types (speed, delay, var, run, async, eval)
- Name.Decorator: Other directive types (aliases)
- Punctuation: "[@", ":" and "]"
- String / Number: Directive values
- Name.Builtin: Markup tags passed through to the output
- Name.Entity: Entities such as &amp;
"""

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Number,
)

from ..models.directives import RESERVED_DIRECTIVES


BUILTIN_PATTERN = '|'.join(sorted(RESERVED_DIRECTIVES))


class TypewrightLexer(RegexLexer):
    """
    Lexer for typewright markup

    Example:
        Hi [@var:name]![@delay:500]

    Tokens:
        [@ → Punctuation
        var → Keyword
        : → Punctuation
        name → String
        ] → Punctuation
    """

    name = 'Typewright'
    aliases = ['typewright', 'tw']
    filenames = ['*.tw']

    tokens = {
        'root': [
            # Numeric values of speed/delay
            (r'(\[@)(\s*)(speed|delay)(\s*)(:)(\s*)([\d.]+)(\s*)(\])',
             bygroups(Punctuation, Text, Keyword, Text, Punctuation, Text, Number, Text, Punctuation)),

            # Built-in directives
            (r'(\[@)(\s*)(' + BUILTIN_PATTERN + r')(\s*)(?:(:)([^\]]*))?(\])',
             bygroups(Punctuation, Text, Keyword, Text, Punctuation, String, Punctuation)),

            # Alias directives
            (r'(\[@)([^\]:]+)(?:(:)([^\]]*))?(\])',
             bygroups(Punctuation, Name.Decorator, Punctuation, String, Punctuation)),

            # HTML tags (pass through as-is)
            (r'<[^>]+>', Name.Builtin),

            # Entities
            (r'&[^;\s]+;', Name.Entity),

            # Everything else is text
            (r'[^\[<&]+', Text),
            (r'.', Text),
        ],
    }


def get_lexer() -> TypewrightLexer:
    """
    Get the TypewrightLexer instance

    Returns:
        TypewrightLexer instance ready for use with Pygments
    """
    return TypewrightLexer()


def source_highlight(source: str) -> str:
    """Render source text with ANSI colors for terminal display"""
    return highlight(source, get_lexer(), TerminalFormatter())
