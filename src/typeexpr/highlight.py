"""Pygments lexer for type expressions."""

from pygments import highlight as _highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import RegexLexer, words
from pygments.token import Error, Keyword, Name, Operator, Punctuation, Text

from typeexpr.types import BUILTINS


class TypeExprLexer(RegexLexer):
    """Pygments lexer for template parameter type expressions."""

    name = "Type expression"
    aliases = ["typeexpr"]
    filenames = []
    mimetypes = ["text/x-typeexpr"]

    tokens = {
        "root": [
            (r"[ \t\r\n]+", Text),
            # Generic keywords
            (words(("list", "map"), prefix=r"\b", suffix=r"\b"), Keyword),
            # Built-in primitives
            (words(tuple(BUILTINS), prefix=r"\b", suffix=r"\b"), Keyword.Type),
            # Record field names (word followed by colon)
            (r"[A-Za-z_][A-Za-z_0-9]*(?=\s*:)", Name.Attribute),
            # Declared types
            (r"[A-Za-z_][A-Za-z_0-9]*", Name.Class),
            (r"\?", Keyword.Pseudo),
            (r"[|.]", Operator),
            (r"[<>\[\],:]", Punctuation),
            (r".", Error),
        ],
    }


def colorize(text: str) -> str:
    """Render *text* with ANSI colors for a terminal."""
    return _highlight(text, TypeExprLexer(), TerminalFormatter()).rstrip("\n")
