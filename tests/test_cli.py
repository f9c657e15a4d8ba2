"""Tests for the CLI entry points."""

import json
from pathlib import Path

from click.testing import CliRunner

from rmp_metro import __version__
from rmp_metro.cli import cli

FIXTURES = Path(__file__).resolve().parent / "fixtures"
SIMPLE_RMP = FIXTURES / "simple.json"


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_render_produces_svg(tmp_path):
    """render command produces an SVG file."""
    out = tmp_path / "output.svg"
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(SIMPLE_RMP), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert out.exists()
    assert "<svg" in out.read_text()


def test_render_default_output(tmp_path):
    """render command uses input stem + .svg when no -o given."""
    rmp = tmp_path / "test.json"
    rmp.write_text(SIMPLE_RMP.read_text(encoding="utf-8"), encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(rmp), "--theme", "light", "--title", "Test"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "test.svg").exists()


def test_build_writes_json(tmp_path):
    out = tmp_path / "lines.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["build", str(SIMPLE_RMP), "--region", "houtu", "-o", str(out)])
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [line["name"] for line in data["lines"]] == ["Line 1", "Line 2"]
    assert len(data["stations"]) == 5
    anting = data["stations"][0]
    assert anting["coord"] == {"x": 0, "y": 64, "z": 0}


def test_validate_success():
    """validate command succeeds on valid input."""
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(SIMPLE_RMP)])
    assert result.exit_code == 0
    assert "Valid:" in result.output
    assert "2 lines" in result.output


def test_validate_bad_file(tmp_path):
    """validate command reports documents without a graph."""
    bad = tmp_path / "bad.json"
    bad.write_text('{"version": 1}')
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(bad)])
    assert result.exit_code == 1
    assert "Parse error:" in result.output


def test_validate_not_json(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("not json at all")
    result = CliRunner().invoke(cli, ["validate", str(bad)])
    assert result.exit_code == 1


def test_info_output():
    """info command prints document and line details."""
    runner = CliRunner()
    result = runner.invoke(cli, ["info", str(SIMPLE_RMP)])
    assert result.exit_code == 0
    assert "Nodes: 8 (6 stations)" in result.output
    assert "Lines: 2" in result.output
    assert "Line 1 (#c23a30): 3 stations" in result.output
    assert "Transfers: 1" in result.output


def test_verbose_flag():
    result = CliRunner().invoke(cli, ["-vv", "validate", str(SIMPLE_RMP)])
    assert result.exit_code == 0
