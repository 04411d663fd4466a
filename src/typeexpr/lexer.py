"""Lexer for type expressions.

Tokens are produced on demand by :meth:`Lexer.next_token` so that a caller
embedding a type expression inside a larger text can stop right after it;
:meth:`Lexer.lex` tokenizes the whole input eagerly.
"""

from __future__ import annotations

from typeexpr.errors import LexError
from typeexpr.source import Span
from typeexpr.tokens import DELIMITERS, KEYWORDS, WHITESPACE, Token, TokenKind

_IDENT_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
_IDENT_CHARS = _IDENT_START | frozenset("0123456789")


class Lexer:
    """Tokenizes a type expression."""

    def __init__(self, source: str, filename: str = "<type>") -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list, ending in EOF."""
        tokens: list[Token] = []
        while True:
            tok = self.next_token()
            if tok.kind == TokenKind.INVALID:
                raise invalid_character(tok)
            tokens.append(tok)
            if tok.kind == TokenKind.EOF:
                return tokens

    def next_token(self) -> Token:
        """Return the next token.

        A character that starts no token comes back as a one-character
        INVALID token; it is up to the caller whether that is an error.
        """
        self._skip_whitespace()
        if self.pos >= len(self.source):
            return self._make(TokenKind.EOF, "", self.pos, self.line, self.col)

        start, line, col = self.pos, self.line, self.col
        ch = self.source[self.pos]
        if ch in _IDENT_START:
            while self.pos < len(self.source) and self.source[self.pos] in _IDENT_CHARS:
                self._advance()
            text = self.source[start:self.pos]
            kind = KEYWORDS.get(text, TokenKind.IDENTIFIER)
            return self._make(kind, text, start, line, col)

        self._advance()
        kind = DELIMITERS.get(ch, TokenKind.INVALID)
        return self._make(kind, ch, start, line, col)

    # ── Helpers ───────────────────────────────────────────────────

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n' or (ch == '\r' and self._peek() != '\n'):
            self.line += 1
            self.col = 1
        elif ch != '\r':
            self.col += 1
        return ch

    def _peek(self) -> str:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return '\0'

    def _skip_whitespace(self) -> None:
        """Skip spaces, tabs and line breaks (CR, LF and CRLF)."""
        while self.pos < len(self.source) and self.source[self.pos] in WHITESPACE:
            self._advance()

    def _make(self, kind: TokenKind, value: str, offset: int, line: int, col: int) -> Token:
        end_col = col + max(len(value), 1) - 1
        return Token(kind, value, Span(self.filename, line, col, line, end_col), offset)


def invalid_character(tok: Token) -> LexError:
    """Build the error raised for an INVALID token."""
    return LexError.at("E100", f"unexpected character {tok.value!r}", tok.span)
