"""Tests for the stylefold command-line interface."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from stylefold import __version__
from stylefold.cli.main import cli

STATIC_SOURCE = "createStyleSheet({a: {color: 'red'}});\n"

STATIC_OUTPUT = (
    "createStyleSheet({\n"
    '  "@raw": ".a-1 {\\n  color: red;\\n}"\n'
    "}, {\n"
    '  "classes": {\n'
    '    "a": "a-1"\n'
    "  }\n"
    "});\n"
)


def _write(tmp_path: Path, source: str, name: str = "styles.js") -> Path:
    path = tmp_path / name
    path.write_text(source, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Group
# ---------------------------------------------------------------------------


class TestGroup:
    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "transform" in result.output
        assert "inspect" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert f"stylefold, version {__version__}" in result.output

    def test_missing_file(self) -> None:
        result = CliRunner().invoke(cli, ["transform", "/nonexistent/file.js"])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# transform
# ---------------------------------------------------------------------------


class TestTransformCommand:
    def test_writes_to_stdout(self, tmp_path: Path) -> None:
        path = _write(tmp_path, STATIC_SOURCE)
        result = CliRunner().invoke(cli, ["transform", str(path)])
        assert result.exit_code == 0
        assert result.stdout == STATIC_OUTPUT
        assert path.read_text() == STATIC_SOURCE

    def test_unchanged_module_echoed(self, tmp_path: Path) -> None:
        source = "const a = 1;\n"
        path = _write(tmp_path, source)
        result = CliRunner().invoke(cli, ["transform", str(path)])
        assert result.exit_code == 0
        assert result.stdout == source

    def test_output_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, STATIC_SOURCE)
        target = tmp_path / "out.js"
        result = CliRunner().invoke(cli, ["transform", str(path), "-o", str(target)])
        assert result.exit_code == 0
        assert result.stdout == ""
        assert target.read_text() == STATIC_OUTPUT

    def test_in_place(self, tmp_path: Path) -> None:
        path = _write(tmp_path, STATIC_SOURCE)
        result = CliRunner().invoke(cli, ["transform", str(path), "--in-place"])
        assert result.exit_code == 0
        assert path.read_text() == STATIC_OUTPUT

    def test_output_and_in_place_conflict(self, tmp_path: Path) -> None:
        path = _write(tmp_path, STATIC_SOURCE)
        result = CliRunner().invoke(
            cli, ["transform", str(path), "--in-place", "-o", str(tmp_path / "x.js")]
        )
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_custom_identifier(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "sheet({a: {color: 'red'}});\n")
        result = CliRunner().invoke(cli, ["transform", str(path), "-i", "sheet"])
        assert result.exit_code == 0
        assert result.stdout.startswith('sheet({\n  "@raw"')

    def test_prefix(self, tmp_path: Path) -> None:
        path = _write(tmp_path, STATIC_SOURCE)
        result = CliRunner().invoke(cli, ["transform", str(path), "--prefix", "app-"])
        assert '"a": "app-a-1"' in result.stdout

    def test_plugins(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "createStyleSheet({a: {fontSize: 12}});\n")
        result = CliRunner().invoke(
            cli, ["transform", str(path), "--plugin", "hyphenate", "--plugin", "default-unit"]
        )
        assert result.exit_code == 0
        assert "font-size: 12px;" in result.stdout

    def test_unknown_plugin(self, tmp_path: Path) -> None:
        path = _write(tmp_path, STATIC_SOURCE)
        result = CliRunner().invoke(cli, ["transform", str(path), "--plugin", "nope"])
        assert result.exit_code == 2
        assert "Unknown plugin 'nope'" in result.output

    def test_parse_error(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "createStyleSheet({a: ")
        result = CliRunner().invoke(cli, ["transform", str(path)])
        assert result.exit_code == 1
        assert "Parse error" in result.stderr

    def test_diagnostics_on_stderr(self, tmp_path: Path) -> None:
        source = "createStyleSheet(getStyles());\n"
        path = _write(tmp_path, source, name="bad.js")
        result = CliRunner().invoke(cli, ["transform", str(path)])
        assert result.exit_code == 0
        assert result.stdout == source
        assert "bad.js: WARNING [line 1, column 1]" in result.stderr

    def test_check_reports_pending_rewrite(self, tmp_path: Path) -> None:
        path = _write(tmp_path, STATIC_SOURCE)
        result = CliRunner().invoke(cli, ["transform", str(path), "--check"])
        assert result.exit_code == 1
        assert "1 call(s) would be rewritten" in result.stderr
        assert result.stdout == ""
        assert path.read_text() == STATIC_SOURCE

    def test_check_clean_module(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "createStyleSheet({a: {color: () => 'red'}});\n")
        result = CliRunner().invoke(cli, ["transform", str(path), "--check"])
        assert result.exit_code == 0


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


class TestInspectCommand:
    def test_selector_breakdown(self, tmp_path: Path) -> None:
        source = (
            "const styles = {\n"
            "  a: {color: 'red', width: () => 1},\n"
            "  b: {color: 'blue'},\n"
            "  c: make()\n"
            "};\n"
            "createStyleSheet(styles);\n"
        )
        path = _write(tmp_path, source)
        result = CliRunner().invoke(cli, ["inspect", str(path)])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "Module: styles.js"
        assert lines[1] == "Calls:  1"
        assert "createStyleSheet() at line 6, column 1" in lines
        assert "  a  mixed  static=color  dynamic=width" in lines
        assert "  b  static  static=color" in lines
        assert "  c  dynamic  (kept as written)" in lines

    def test_skipped_calls(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "createStyleSheet();\ncreateStyleSheet(load());\n")
        result = CliRunner().invoke(cli, ["inspect", str(path)])
        assert result.exit_code == 0
        assert "  skipped: no style description" in result.output
        assert "  skipped: Style description is not an object literal" in result.output

    def test_custom_identifier(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "sheet({a: {}});\ncreateStyleSheet({b: {}});\n")
        result = CliRunner().invoke(cli, ["inspect", str(path), "-i", "sheet"])
        assert "Calls:  1" in result.output
        assert "sheet() at line 1, column 1" in result.output

    def test_writes_nothing(self, tmp_path: Path) -> None:
        path = _write(tmp_path, STATIC_SOURCE)
        CliRunner().invoke(cli, ["inspect", str(path)])
        assert path.read_text() == STATIC_SOURCE

    def test_parse_error(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "const = ;")
        result = CliRunner().invoke(cli, ["inspect", str(path)])
        assert result.exit_code == 1
        assert "Parse error" in result.output
