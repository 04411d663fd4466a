"""Token kinds and token representation for the type expression lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typeexpr.source import Span


class TokenKind(Enum):
    # Delimiters
    LESS = auto()
    GREATER = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()
    PIPE = auto()
    COLON = auto()
    DOT = auto()
    QUESTION = auto()

    # Keywords
    LIST = auto()
    MAP = auto()

    # Identifiers
    IDENTIFIER = auto()

    # Special
    INVALID = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    span: Span
    offset: int = 0


KEYWORDS: dict[str, TokenKind] = {
    "list": TokenKind.LIST,
    "map": TokenKind.MAP,
}

DELIMITERS: dict[str, TokenKind] = {
    "<": TokenKind.LESS,
    ">": TokenKind.GREATER,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ",": TokenKind.COMMA,
    "|": TokenKind.PIPE,
    ":": TokenKind.COLON,
    ".": TokenKind.DOT,
    "?": TokenKind.QUESTION,
}

WHITESPACE = frozenset(" \t\r\n")

# Human-readable spellings used in "expected X, got Y" diagnostics.
TOKEN_DISPLAY: dict[TokenKind, str] = {
    **{kind: f"'{ch}'" for ch, kind in DELIMITERS.items()},
    TokenKind.LIST: "'list'",
    TokenKind.MAP: "'map'",
    TokenKind.IDENTIFIER: "identifier",
    TokenKind.INVALID: "invalid character",
    TokenKind.EOF: "end of input",
}
