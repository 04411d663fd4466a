"""typeexpr command line interface."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from typeexpr import __version__
from typeexpr.config import TypeExprConfig, find_config, load_config
from typeexpr.errors import DiagnosticRenderer, ParseError
from typeexpr.lexer import Lexer
from typeexpr.params import is_param_header, parse_param_header
from typeexpr.parser import parse_type_declaration
from typeexpr.registry import DefaultTypeRegistry, DuplicateTypeError
from typeexpr.source import split_lines
from typeexpr.tokens import TokenKind
from typeexpr.types import type_name

logger = logging.getLogger(__name__)


def _load(config_path: str | None) -> TypeExprConfig:
    """Explicit --config wins; otherwise look for typeexpr.toml upwards."""
    if config_path is not None:
        return load_config(Path(config_path))
    try:
        return load_config(find_config())
    except FileNotFoundError:
        logger.debug("no config file found, using defaults")
        return TypeExprConfig()


def _registry(config: TypeExprConfig, declared: tuple[str, ...]) -> DefaultTypeRegistry:
    try:
        registry = DefaultTypeRegistry.from_config(config)
        for name in declared:
            registry.declare(name)
    except DuplicateTypeError as e:
        raise click.UsageError(str(e)) from None
    return registry


def _report(error: ParseError, source: str | None, color: bool) -> None:
    renderer = DiagnosticRenderer(color=color, source=source)
    click.echo(renderer.render(error.diagnostic), err=True)


@click.group()
@click.version_option(__version__, prog_name="typeexpr")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Parse and check template parameter type expressions."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


@main.command()
@click.argument("expression")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="Path to typeexpr.toml.")
@click.option("-d", "--declare", "declared", multiple=True,
              help="Declare a named type (repeatable).")
@click.option("--color/--no-color", default=None, help="Colorize output.")
def parse(expression: str, config_path: str | None, declared: tuple[str, ...],
          color: bool | None) -> None:
    """Parse EXPRESSION and print its canonical form."""
    config = _load(config_path)
    if color is None:
        color = config.output.color
    registry = _registry(config, declared)

    try:
        ty = parse_type_declaration(expression, registry, "<expression>")
    except ParseError as e:
        _report(e, expression, color)
        raise SystemExit(1)

    text = type_name(ty)
    if color:
        from typeexpr.highlight import colorize

        text = colorize(text)
    click.echo(text)


@main.command()
@click.argument("expression")
def tokens(expression: str) -> None:
    """Dump the tokens of EXPRESSION."""
    lexer = Lexer(expression, "<expression>")
    while True:
        tok = lexer.next_token()
        span = tok.span
        click.echo(f"{span.start_line}:{span.start_col}\t{tok.kind.name}\t{tok.value!r}")
        if tok.kind in (TokenKind.EOF, TokenKind.INVALID):
            break
    if tok.kind == TokenKind.INVALID:
        raise SystemExit(1)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="Path to typeexpr.toml.")
@click.option("-d", "--declare", "declared", multiple=True,
              help="Declare a named type (repeatable).")
def check(file: str, config_path: str | None, declared: tuple[str, ...]) -> None:
    """Check every {@param ...} header in FILE."""
    config = _load(config_path)
    registry = _registry(config, declared)
    source = Path(file).read_text()

    checked = failed = 0
    for line_num, line in enumerate(split_lines(source), start=1):
        if not is_param_header(line):
            continue
        checked += 1
        try:
            decl = parse_param_header(line, registry, file, line_num)
        except ParseError as e:
            failed += 1
            _report(e, source, config.output.color)
            continue
        logger.debug("%s: %s", decl.name, type_name(decl.type))

    if failed:
        click.echo(f"checked {checked} params — {failed} FAILED", err=True)
        raise SystemExit(1)
    click.echo(f"checked {checked} params — no errors")
