"""Parse errors and their colored terminal rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from typeexpr.source import line_at

if TYPE_CHECKING:
    from typeexpr.source import Span


_RED = "\033[1;31m"
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str = ""


@dataclass
class Diagnostic:
    """One error with its location and optional hints."""

    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    @property
    def span(self) -> Span | None:
        if self.labels:
            return self.labels[0].span
        return None


class DiagnosticRenderer:
    """Renders a diagnostic as ``error[E203]: ...`` with the offending line.

    The quoted line and caret underline come from *source*; without it only
    the location is printed.
    """

    def __init__(self, *, color: bool = True, source: str | None = None) -> None:
        self.color = color
        self.source = source

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def render(self, diag: Diagnostic) -> str:
        bar = f"  {self._c(_BLUE)}   |{self._c(_RESET)}"
        lines = [
            f"{self._c(_RED)}error[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        ]

        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            lines.append(bar)

            source_line = None
            if self.source is not None:
                source_line = line_at(self.source, span.start_line)
            if source_line is not None:
                gutter = f"{span.start_line:>4}"
                lines.append(f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}")
                if span.start_line == span.end_line:
                    carets = "^" * max(1, span.end_col - span.start_col + 1)
                    padding = " " * (span.start_col - 1)
                    lines.append(f"{bar} {padding}{self._c(_RED)}{carets}{self._c(_RESET)}")

            if label.message:
                lines.append(f"{bar}   {self._c(_RED)}{label.message}{self._c(_RESET)}")

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


class ParseError(Exception):
    """A type expression could not be parsed.

    Parsing stops at the first problem, so every error carries exactly one
    diagnostic.
    """

    def __init__(self, diagnostic: Diagnostic) -> None:
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def code(self) -> str:
        return self.diagnostic.code

    @property
    def span(self) -> Span | None:
        return self.diagnostic.span

    @classmethod
    def at(
        cls, code: str, message: str, span: Span, label: str = "",
        notes: list[str] | None = None,
    ) -> ParseError:
        return cls(Diagnostic(code, message, [DiagnosticLabel(span, label)], list(notes or ())))


class LexError(ParseError):
    """An input character does not begin any token."""
