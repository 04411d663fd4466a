"""Template parameter headers: ``{@param name: TYPE}``.

The header syntax wraps a type expression, so the type is parsed in
expression mode and the header parser picks up again at the closing brace.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from typeexpr.errors import ParseError
from typeexpr.parser import parse_type_expression
from typeexpr.registry import TypeRegistry
from typeexpr.source import Span
from typeexpr.types import Type

_HEAD = re.compile(r"\s*\{@param(\?)?\s+([A-Za-z_][A-Za-z_0-9]*)\s*:")


@dataclass(frozen=True)
class ParamDecl:
    name: str
    type: Type
    optional: bool = False


def parse_param_header(
    text: str, registry: TypeRegistry, filename: str = "<param>", line: int = 1,
) -> ParamDecl:
    """Parse one ``{@param name: TYPE}`` or ``{@param? name: TYPE}`` header."""
    head = _HEAD.match(text)
    if head is None:
        raise _header_error("expected '{@param name: TYPE}'", filename, line, 1, len(text))

    type_start = head.end()
    try:
        ty, consumed = parse_type_expression(text[type_start:], registry, filename)
    except ParseError as e:
        raise _shift(e, type_start, line) from None

    end = type_start + consumed
    if not text.startswith("}", end) or text[end + 1:].strip():
        raise _header_error(
            "expected '}' after parameter type", filename, line, end + 1, end + 1,
        )
    return ParamDecl(head.group(2), ty, optional=head.group(1) is not None)


def is_param_header(text: str) -> bool:
    return text.lstrip().startswith("{@param")


def _header_error(message: str, filename: str, line: int, start: int, end: int) -> ParseError:
    return ParseError.at("E300", message, Span(filename, line, start, line, max(start, end)))


def _shift(error: ParseError, columns: int, line: int) -> ParseError:
    """Re-anchor an error from the type substring onto the header line."""
    span = error.span
    if span is None or span.start_line != 1:
        return error
    moved = Span(span.file, line, span.start_col + columns, line, span.end_col + columns)
    label = error.diagnostic.labels[0].message
    return type(error).at(error.code, error.message, moved, label, error.diagnostic.notes)
