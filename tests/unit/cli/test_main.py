"""Unit tests for the root CLI application."""

import logging
from pathlib import Path

import pytest
from modctl import __version__
from modctl.cli.main import app, configure_logging
from typer.testing import CliRunner

runner = CliRunner()


class TestRootApp:
    """Tests for global options and the default command."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"modctl version {__version__}" in result.stdout

    def test_short_help(self) -> None:
        """-h is an alias for --help and lists the commands."""
        result = runner.invoke(app, ["-h"])
        assert result.exit_code == 0
        for command in ("sync", "plan", "init", "self-update"):
            assert command in result.stdout

    def test_no_command_runs_sync(self, cli_env: Path) -> None:
        """Without a command, modctl syncs (first run creates the manifest)."""
        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert "Created example manifest" in result.output
        assert (cli_env / "modctl.toml").exists()


class TestConfigureLogging:
    """Tests for log level selection."""

    @pytest.mark.parametrize(
        ("verbose", "quiet", "level"),
        [
            (False, False, logging.WARNING),
            (True, False, logging.DEBUG),
            (False, True, logging.ERROR),
            (True, True, logging.DEBUG),
        ],
    )
    def test_levels(self, verbose: bool, quiet: bool, level: int) -> None:
        configure_logging(verbose, quiet)
        assert logging.getLogger().level == level
