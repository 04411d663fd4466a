"""Parser for type expressions.

Recursive descent with one token of lookahead over this grammar::

    TypeDecl    := TypeExpr EOF
    TypeExpr    := Primary ('|' Primary)*
    Primary     := TypeName | '?' | ListType | MapType | RecordType
    ListType    := 'list' ('<' TypeExpr (',' TypeExpr)* '>')?
    MapType     := 'map'  ('<' TypeExpr (',' TypeExpr)* '>')?
    RecordType  := '[' (Field (',' Field)*)? ']'
    Field       := IDENT ':' TypeExpr
    TypeName    := IDENT ('.' IDENT)*

Composite types are built through the registry; parsing stops with a
ParseError at the first problem.
"""

from __future__ import annotations

from typeexpr.errors import ParseError
from typeexpr.lexer import Lexer, invalid_character
from typeexpr.registry import TypeRegistry
from typeexpr.source import Span
from typeexpr.tokens import TOKEN_DISPLAY, Token, TokenKind
from typeexpr.types import UNKNOWN, Type, make_union

_GENERIC_ARITY: dict[TokenKind, int] = {
    TokenKind.LIST: 1,
    TokenKind.MAP: 2,
}

_GENERIC_USAGE: dict[TokenKind, str] = {
    TokenKind.LIST: "list<T>",
    TokenKind.MAP: "map<K, V>",
}

# Each nesting level costs a few Python frames; stay well below the
# interpreter's recursion limit.
MAX_NESTING_DEPTH = 100


class TypeParser:
    """Parses one type expression pulled from a lexer."""

    def __init__(self, lexer: Lexer, registry: TypeRegistry) -> None:
        self.lexer = lexer
        self.registry = registry
        self._lookahead: Token = lexer.next_token()
        self._depth = 0

    @property
    def filename(self) -> str:
        return self.lexer.filename

    # ── Token access ─────────────────────────────────────────────

    def _current(self) -> Token:
        return self._lookahead

    def _at(self, kind: TokenKind) -> bool:
        return self._lookahead.kind == kind

    def _advance(self) -> Token:
        tok = self._lookahead
        if tok.kind == TokenKind.INVALID:
            raise invalid_character(tok)
        if tok.kind != TokenKind.EOF:
            self._lookahead = self.lexer.next_token()
        return tok

    def _expect(self, kind: TokenKind) -> Token:
        if self._at(kind):
            return self._advance()
        raise self._unexpected(TOKEN_DISPLAY[kind])

    def _unexpected(self, expected: str) -> ParseError:
        tok = self._current()
        if tok.kind == TokenKind.INVALID:
            return invalid_character(tok)
        got = TOKEN_DISPLAY[tok.kind]
        if tok.kind == TokenKind.IDENTIFIER:
            got = f"identifier {tok.value!r}"
        return ParseError.at("E200", f"expected {expected}, got {got}", tok.span)

    def _span(self, start: Span, end: Span) -> Span:
        return Span(self.filename, start.start_line, start.start_col, end.end_line, end.end_col)

    # ── Entry points ─────────────────────────────────────────────

    def parse_type_declaration(self) -> Type:
        """Parse a type expression that must span the whole input."""
        ty = self.parse_type_expression()
        self._expect(TokenKind.EOF)
        return ty

    def parse_type_expression(self) -> Type:
        """Parse one type expression, leaving the cursor on whatever follows it."""
        if self._depth >= MAX_NESTING_DEPTH:
            raise ParseError.at(
                "E205", "type expression nested too deeply", self._current().span,
                notes=[f"at most {MAX_NESTING_DEPTH} levels of nesting are supported"],
            )
        self._depth += 1
        try:
            members = [self._parse_primary()]
            while self._at(TokenKind.PIPE):
                self._advance()
                members.append(self._parse_primary())
        finally:
            self._depth -= 1
        return make_union(members)

    @property
    def end_offset(self) -> int:
        """Offset of the first character not consumed by the parser."""
        return self._lookahead.offset

    # ── Primaries ────────────────────────────────────────────────

    def _parse_primary(self) -> Type:
        tok = self._current()
        if tok.kind == TokenKind.IDENTIFIER:
            return self._parse_type_name()
        if tok.kind == TokenKind.QUESTION:
            self._advance()
            return UNKNOWN
        if tok.kind in _GENERIC_ARITY:
            return self._parse_generic()
        if tok.kind == TokenKind.LBRACKET:
            return self._parse_record()
        raise self._unexpected("a type")

    def _parse_generic(self) -> Type:
        """Parse ``list<...>`` or ``map<...>`` and check the argument count."""
        keyword = self._advance()
        args: list[Type] = []
        end = keyword.span
        if self._at(TokenKind.LESS):
            self._advance()
            args.append(self.parse_type_expression())
            while self._at(TokenKind.COMMA):
                self._advance()
                args.append(self.parse_type_expression())
            end = self._expect(TokenKind.GREATER).span

        arity = _GENERIC_ARITY[keyword.kind]
        if len(args) != arity:
            plural = "parameter" if arity == 1 else "parameters"
            raise ParseError.at(
                "E201",
                f"expected {arity} type {plural} for type '{keyword.value}', not {len(args)}",
                self._span(keyword.span, end),
                notes=[f"usage: {_GENERIC_USAGE[keyword.kind]}"],
            )
        if keyword.kind == TokenKind.LIST:
            return self.registry.get_or_create_list(args[0])
        return self.registry.get_or_create_map(args[0], args[1])

    def _parse_record(self) -> Type:
        self._expect(TokenKind.LBRACKET)
        fields: dict[str, Type] = {}
        if not self._at(TokenKind.RBRACKET):
            self._parse_field(fields)
            while self._at(TokenKind.COMMA):
                self._advance()
                self._parse_field(fields)
        self._expect(TokenKind.RBRACKET)
        return self.registry.get_or_create_record(fields)

    def _parse_field(self, fields: dict[str, Type]) -> None:
        name_tok = self._expect(TokenKind.IDENTIFIER)
        if name_tok.value in fields:
            raise ParseError.at(
                "E202",
                f"duplicate field '{name_tok.value}' in record type",
                name_tok.span,
                "already defined earlier in this record",
            )
        self._expect(TokenKind.COLON)
        fields[name_tok.value] = self.parse_type_expression()

    def _parse_type_name(self) -> Type:
        first = self._expect(TokenKind.IDENTIFIER)
        parts = [first.value]
        last = first
        while self._at(TokenKind.DOT):
            self._advance()
            last = self._expect(TokenKind.IDENTIFIER)
            parts.append(last.value)
        name = ".".join(parts)
        span = self._span(first.span, last.span)

        ty = self.registry.resolve(name)
        if ty is None:
            raise ParseError.at("E203", f"unknown type '{name}'", span)
        if self._at(TokenKind.LESS):
            raise ParseError.at(
                "E204",
                f"template parameters not allowed for type '{name}'",
                self._current().span,
                notes=["only 'list' and 'map' take type parameters"],
            )
        return ty


# ── Convenience functions ───────────────────────────────────────


def parse_type_declaration(
    text: str, registry: TypeRegistry, filename: str = "<type>",
) -> Type:
    """Parse *text*, which must consist of exactly one type expression."""
    return TypeParser(Lexer(text, filename), registry).parse_type_declaration()


def parse_type_expression(
    text: str, registry: TypeRegistry, filename: str = "<type>",
) -> tuple[Type, int]:
    """Parse a type expression at the start of *text*.

    Returns the type and the offset where the unparsed remainder of *text*
    begins (leading whitespace of the remainder is already skipped).
    """
    parser = TypeParser(Lexer(text, filename), registry)
    ty = parser.parse_type_expression()
    return ty, parser.end_offset
