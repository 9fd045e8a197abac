"""Tests for the list/show commands and CLI wiring."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from notesift.cli import cli
from notesift.commands.list_cmd import run_list
from notesift.commands.show_cmd import run_show
from notesift.config import BrowserConfig


@pytest.fixture
def config(notes_dir: Path) -> BrowserConfig:
    return BrowserConfig(directory=notes_dir)


def test_run_list_json(config: BrowserConfig, capsys: pytest.CaptureFixture[str]):
    exit_code = run_list(config, [":work"], output_json=True)
    assert exit_code == 0

    data = json.loads(capsys.readouterr().out)
    assert data["mode"] == "incremental"
    assert data["filter"] == ":work"
    assert data["total"] == 2
    assert data["matched"] == 1
    assert data["notes"][0]["title"] == "Alpha"
    assert data["notes"][0]["tags"] == ["work", "urgent"]


def test_run_list_limit(config: BrowserConfig, capsys: pytest.CaptureFixture[str]):
    run_list(config, [], output_json=True, limit=1)
    data = json.loads(capsys.readouterr().out)
    assert data["matched"] == 2
    assert len(data["notes"]) == 1


def test_run_list_table(config: BrowserConfig, capsys: pytest.CaptureFixture[str]):
    assert run_list(config, ["beta"]) == 0
    out = capsys.readouterr().out
    assert "Beta" in out
    assert "Alpha" not in out


def test_run_list_invalid_regex(config: BrowserConfig, capsys: pytest.CaptureFixture[str]):
    assert run_list(config, ["("], regex=True, output_json=True) == 1
    captured = capsys.readouterr()
    data = json.loads(captured.out)
    assert data["error"]
    assert data["matched"] == 2
    assert "Invalid regex" in captured.err


def test_run_show(config: BrowserConfig, capsys: pytest.CaptureFixture[str]):
    assert run_show(config, Path("a.org"), output_json=True) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["title"] == "Alpha"
    assert data["authored"] is None


def test_run_show_unknown(config: BrowserConfig):
    assert run_show(config, Path("missing.org")) == 1


def test_cli_list(notes_dir: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    runner = CliRunner()
    result = runner.invoke(cli, ["--dir", str(notes_dir), "list", "--json", "alph"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [n["title"] for n in data["notes"]] == ["Alpha"]


def test_cli_missing_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    runner = CliRunner()
    result = runner.invoke(cli, ["--dir", str(tmp_path / "nope"), "list"])
    assert result.exit_code != 0
    assert "does not exist" in result.output
