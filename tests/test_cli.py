"""Tests for the root CLI group."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from ipcserver import __version__
from ipcserver.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestRootGroup:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_subcommand_prints_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_socket_path_from_config(
        self, cli_runner: CliRunner, tmp_path: Path, socket_dir: Path
    ) -> None:
        target = socket_dir / "from-config.sock"
        (tmp_path / "ipcserver.toml").write_text(f'socket_path = "{target}"\n')
        result = cli_runner.invoke(cli, ["send", "add", "1", "2"])
        assert result.exit_code == 1
        assert str(target) in result.output

    def test_socket_flag_beats_config(
        self, cli_runner: CliRunner, tmp_path: Path, socket_dir: Path
    ) -> None:
        (tmp_path / "ipcserver.toml").write_text('socket_path = "config.sock"\n')
        flag = socket_dir / "flag.sock"
        result = cli_runner.invoke(cli, ["--socket", str(flag), "send", "add", "1", "2"])
        assert str(flag) in result.output

    def test_explicit_config_file(
        self, cli_runner: CliRunner, tmp_path: Path, socket_dir: Path
    ) -> None:
        target = socket_dir / "explicit.sock"
        config = tmp_path / "other.toml"
        config.write_text(f'socket_path = "{target}"\n')
        result = cli_runner.invoke(cli, ["--config", str(config), "send", "push", "1"])
        assert str(target) in result.output
