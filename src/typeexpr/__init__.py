"""Parser for template parameter type expressions."""

from __future__ import annotations

from typeexpr.errors import LexError, ParseError
from typeexpr.parser import parse_type_declaration, parse_type_expression
from typeexpr.registry import DefaultTypeRegistry, TypeRegistry

__version__ = "0.3.0"

__all__ = [
    "DefaultTypeRegistry",
    "LexError",
    "ParseError",
    "TypeRegistry",
    "parse_type_declaration",
    "parse_type_expression",
]
