"""
Lexer tests - Pygments highlighting of directive markup
"""

from pygments.token import Keyword, Name, Number, Punctuation, String, Text

from typewright.lib.lexer import TypewrightLexer, get_lexer, source_highlight


def tokens_of(source):
    """Token stream of source, without the newline Pygments appends by default"""
    return list(TypewrightLexer(ensurenl=False).get_tokens(source))


class TestDirectiveHighlighting:
    """Test token types for directives"""

    def test_builtin_directive(self):
        assert tokens_of("[@var:name]") == [
            (Punctuation, "[@"),
            (Keyword, "var"),
            (Punctuation, ":"),
            (String, "name"),
            (Punctuation, "]"),
        ]

    def test_numeric_value(self):
        assert (Number, "250") in tokens_of("[@delay:250]")

    def test_alias_directive(self):
        tokens = tokens_of("[@print:'hi']")
        assert (Name.Decorator, "print") in tokens
        assert (String, "'hi'") in tokens

    def test_directive_without_value(self):
        assert (Name.Decorator, "now") in tokens_of("[@now]")


class TestTextHighlighting:
    """Test markup and plain text"""

    def test_tags_and_entities(self):
        tokens = tokens_of("<b>a&amp;b</b>")
        assert (Name.Builtin, "<b>") in tokens
        assert (Name.Entity, "&amp;") in tokens

    def test_plain_text(self):
        assert tokens_of("Hello") == [(Text, "Hello")]

    def test_unclosed_directive_is_text(self):
        tokens = tokens_of("[@delay")
        assert all(token is Text for token, _ in tokens)


class TestHighlight:
    """Test terminal rendering"""

    def test_source_highlight_keeps_text(self):
        rendered = source_highlight("Hi [@var:name]!")
        assert "Hi " in rendered
        assert "name" in rendered

    def test_lexer_metadata(self):
        assert "typewright" in TypewrightLexer.aliases
        assert isinstance(get_lexer(), TypewrightLexer)
