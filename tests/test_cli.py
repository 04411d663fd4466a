"""Tests for the typeexpr CLI, config, and error rendering."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from typeexpr import __version__
from typeexpr.cli import main
from typeexpr.config import find_config, load_config
from typeexpr.errors import Diagnostic, DiagnosticLabel, DiagnosticRenderer, ParseError
from typeexpr.highlight import TypeExprLexer, colorize
from typeexpr.parser import parse_type_declaration
from typeexpr.registry import DefaultTypeRegistry
from typeexpr.source import Span


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def tmp_project(tmp_path):
    """Create a directory with a typeexpr.toml and a template."""
    (tmp_path / "typeexpr.toml").write_text(
        '[types]\ndeclared = ["foo.Bar", "Baz"]\n'
        "[output]\ncolor = false\n"
    )
    (tmp_path / "page.soy").write_text(
        "{template .page}\n"
        "  {@param bar: foo.Bar}\n"
        "  {@param? items: list<Baz>|null}\n"
        "  <p>{$bar}</p>\n"
        "{/template}\n"
    )
    return tmp_path


# --- CLI tests ---


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "parse" in result.output
        assert "tokens" in result.output
        assert "check" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_parse(self, runner):
        result = runner.invoke(main, ["parse", "--no-color", "map<string,list<int>>|?"])
        assert result.exit_code == 0
        assert result.output == "map<string, list<int>>|?\n"

    def test_parse_with_declared_type(self, runner):
        result = runner.invoke(main, ["parse", "--no-color", "-d", "foo.Bar", "list<foo.Bar>"])
        assert result.exit_code == 0
        assert result.output.strip() == "list<foo.Bar>"

    def test_parse_error(self, runner):
        result = runner.invoke(main, ["parse", "--no-color", "list<int, string>"])
        assert result.exit_code == 1
        assert "error[E201]" in result.output
        assert "expected 1 type parameter for type 'list', not 2" in result.output

    def test_parse_unknown_type(self, runner):
        result = runner.invoke(main, ["parse", "--no-color", "Nope"])
        assert result.exit_code == 1
        assert "unknown type 'Nope'" in result.output

    def test_parse_colored(self, runner):
        result = runner.invoke(main, ["parse", "--color", "list<int>"])
        assert result.exit_code == 0
        assert "\x1b[" in result.output

    def test_parse_redeclared_builtin(self, runner):
        result = runner.invoke(main, ["parse", "-d", "int", "int"])
        assert result.exit_code != 0
        assert "already declared" in result.output

    def test_parse_uses_config(self, runner, tmp_project):
        config = str(tmp_project / "typeexpr.toml")
        result = runner.invoke(main, ["parse", "--config", config, "map<string, Baz>"])
        assert result.exit_code == 0
        assert result.output == "map<string, Baz>\n"

    def test_parse_finds_config(self, runner, tmp_project, monkeypatch):
        monkeypatch.chdir(tmp_project)
        result = runner.invoke(main, ["parse", "foo.Bar"])
        assert result.exit_code == 0
        assert result.output == "foo.Bar\n"

    def test_verbose(self, runner):
        result = runner.invoke(main, ["-v", "parse", "--no-color", "int"])
        assert result.exit_code == 0

    def test_tokens(self, runner):
        result = runner.invoke(main, ["tokens", "[a: int]"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "1:1\tLBRACKET\t'['"
        assert lines[1] == "1:2\tIDENTIFIER\t'a'"
        assert lines[-1].split("\t")[1] == "EOF"

    def test_tokens_invalid(self, runner):
        result = runner.invoke(main, ["tokens", "a $"])
        assert result.exit_code == 1
        assert "INVALID" in result.output

    def test_check_ok(self, runner, tmp_project):
        result = runner.invoke(main, [
            "check", "--config", str(tmp_project / "typeexpr.toml"),
            str(tmp_project / "page.soy"),
        ])
        assert result.exit_code == 0
        assert "checked 2 params" in result.output

    def test_check_reports_each_failure(self, runner, tmp_path):
        page = tmp_path / "bad.soy"
        page.write_text(
            "{@param a: list}\n"
            "{@param b: int}\n"
            "{@param c: [x: int, x: int]}\n"
        )
        result = runner.invoke(main, ["check", "-d", "Unused", str(page)])
        assert result.exit_code == 1
        assert "E201" in result.output
        assert "E202" in result.output
        assert "2 FAILED" in result.output

    def test_check_line_numbers_ignore_form_feed(self, runner, tmp_path):
        page = tmp_path / "feed.soy"
        page.write_text("<p>a\x0cb c</p>\n{@param b: list}\n")
        result = runner.invoke(main, ["check", str(page)])
        assert result.exit_code == 1
        assert f"{page}:2:12" in result.output
        assert "{@param b: list}" in result.output


# --- Config tests ---


class TestConfig:
    def test_load_config(self, tmp_project):
        config = load_config(tmp_project / "typeexpr.toml")
        assert config.types.declared == ["foo.Bar", "Baz"]
        assert config.output.color is False

    def test_defaults(self, tmp_path):
        path = tmp_path / "typeexpr.toml"
        path.write_text("")
        config = load_config(path)
        assert config.types.declared == []
        assert config.output.color is True

    def test_find_config_walks_up(self, tmp_project):
        nested = tmp_project / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == tmp_project / "typeexpr.toml"

    def test_find_config_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            find_config(tmp_path)


# --- Diagnostic rendering tests ---


class TestDiagnosticRenderer:
    def test_render_from_source(self):
        source = "list<Nope>"
        with pytest.raises(ParseError) as exc:
            parse_type_declaration(source, DefaultTypeRegistry())
        out = DiagnosticRenderer(color=False, source=source).render(exc.value.diagnostic)
        lines = out.splitlines()
        assert lines[0] == "error[E203]: unknown type 'Nope'"
        assert "--> <type>:1:6" in lines[1]
        assert lines[3].endswith("list<Nope>")
        assert lines[4].endswith("     ^^^^")

    def test_render_notes_and_label(self):
        source = "int\nmap<int>\n"
        span = Span("types.txt", 2, 1, 2, 8)
        diag = Diagnostic(
            code="E201",
            message="wrong arity",
            labels=[DiagnosticLabel(span=span, message="here")],
            notes=["usage: map<K, V>"],
        )
        out = DiagnosticRenderer(color=False, source=source).render(diag)
        assert "map<int>" in out
        assert "^^^^^^^^" in out
        assert "here" in out
        assert "note: usage: map<K, V>" in out

    def test_arity_error_carries_usage_note(self):
        with pytest.raises(ParseError) as exc:
            parse_type_declaration("map<int>", DefaultTypeRegistry())
        out = DiagnosticRenderer(color=False, source="map<int>").render(exc.value.diagnostic)
        assert "note: usage: map<K, V>" in out

    def test_template_parameters_note(self):
        with pytest.raises(ParseError) as exc:
            parse_type_declaration("int<string>", DefaultTypeRegistry())
        assert exc.value.diagnostic.notes == ["only 'list' and 'map' take type parameters"]

    def test_without_source_skips_source_line(self):
        span = Span("<type>", 1, 1, 1, 3)
        diag = Diagnostic("E203", "unknown type 'x'", [DiagnosticLabel(span)])
        out = DiagnosticRenderer(color=False).render(diag)
        assert "--> <type>:1:1" in out
        assert "^" not in out

    def test_color_codes(self):
        diag = Diagnostic("E100", "unexpected character '$'")
        assert "\033[" in DiagnosticRenderer(color=True).render(diag)
        assert "\033[" not in DiagnosticRenderer(color=False).render(diag)


class TestHighlight:
    def test_lexer_token_types(self):
        from pygments.token import Keyword, Name

        toks = [(t, v) for t, v in TypeExprLexer().get_tokens("list<[a: Foo]>") if v.strip()]
        assert toks[0] == (Keyword, "list")
        assert (Name.Attribute, "a") in toks
        assert (Name.Class, "Foo") in toks

    def test_colorize_keeps_text(self):
        import re

        plain = re.sub(r"\x1b\[[0-9;]*m", "", colorize("map<string, int>"))
        assert plain == "map<string, int>"
