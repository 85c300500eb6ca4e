"""Unit tests for the CLI — command registration and write/read/inspect/delete."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from planstore.cli.app import app

runner = CliRunner()


@pytest.fixture
def cli_paths(tmp_path: Path) -> list[str]:
    return ["--db", str(tmp_path / "records.db"), "--mount-path", str(tmp_path / "mnt")]


@pytest.fixture
def plan_file(tmp_path: Path) -> Path:
    path = tmp_path / "tfplan"
    path.write_bytes(os.urandom(2000))
    return path


class TestCliApp:
    """The CLI must register all expected commands and show help."""

    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("write", "read", "inspect", "delete"):
            assert command in result.output

    @pytest.mark.parametrize("command", ["write", "read", "inspect", "delete"])
    def test_command_help(self, command: str):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0


class TestCliRoundTrip:
    def test_write_then_read(self, tmp_path: Path, cli_paths: list[str], plan_file: Path):
        result = runner.invoke(app, ["write", "my-stack", str(plan_file), "-p", "plan-1", *cli_paths])
        assert result.exit_code == 0, result.output
        assert "size-limited" in result.output

        out = tmp_path / "restored"
        result = runner.invoke(app, ["read", "my-stack", "-o", str(out), *cli_paths])
        assert result.exit_code == 0, result.output
        assert out.read_bytes() == plan_file.read_bytes()

    def test_spill_and_inspect(self, cli_paths: list[str], plan_file: Path):
        result = runner.invoke(
            app,
            [
                "write", "my-stack", str(plan_file), "-p", "plan-1",
                "--auto-fallback", "--max-size", "10", *cli_paths,
            ],
        )
        assert result.exit_code == 0, result.output
        assert "spill" in result.output

        result = runner.invoke(app, ["inspect", "my-stack", *cli_paths])
        assert result.exit_code == 0, result.output
        assert "locator" in result.output
        assert "Spill file" in result.output

    def test_read_missing(self, cli_paths: list[str]):
        result = runner.invoke(app, ["read", "nothing-here", *cli_paths])
        assert result.exit_code == 2

    def test_delete(self, cli_paths: list[str], plan_file: Path):
        runner.invoke(app, ["write", "my-stack", str(plan_file), "-p", "plan-1", *cli_paths])
        result = runner.invoke(app, ["delete", "my-stack", *cli_paths])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["inspect", "my-stack", *cli_paths])
        assert result.exit_code == 2

    def test_write_invalid_name(self, cli_paths: list[str], plan_file: Path):
        result = runner.invoke(app, ["write", "Bad_Name", str(plan_file), "-p", "p", *cli_paths])
        assert result.exit_code == 1
        assert "Write failed" in result.output
