"""Span tracking for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """A range within a source text."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"


def split_lines(source: str) -> list[str]:
    """Split on CR, LF and CRLF only, the line breaks the lexer counts."""
    return source.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def line_at(source: str, n: int) -> str | None:
    """Return the 1-indexed line of *source*, or None if out of range."""
    lines = split_lines(source)
    if 1 <= n <= len(lines):
        return lines[n - 1]
    return None
