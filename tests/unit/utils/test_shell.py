"""Unit tests for shell execution utilities."""

import os
from unittest.mock import MagicMock, patch

import pytest
from modctl.utils.shell import run_interactive


class TestRunInteractive:
    """Tests for run_interactive function."""

    @patch("modctl.utils.shell.subprocess.run")
    def test_returns_exit_code(self, mock_run: MagicMock) -> None:
        """run_interactive returns the subprocess exit code."""
        mock_run.return_value = MagicMock(returncode=4)

        assert run_interactive(["/opt/modctl", "sync"]) == 4

    @patch("modctl.utils.shell.subprocess.run")
    def test_does_not_capture_output(self, mock_run: MagicMock) -> None:
        """run_interactive inherits the terminal instead of capturing output."""
        mock_run.return_value = MagicMock(returncode=0)

        run_interactive(["/opt/modctl"])

        kwargs = mock_run.call_args.kwargs
        assert "capture_output" not in kwargs
        assert "stdout" not in kwargs
        assert kwargs["check"] is False

    @patch("modctl.utils.shell.subprocess.run")
    def test_merges_environment(self, mock_run: MagicMock) -> None:
        """Extra variables are added to the current environment."""
        mock_run.return_value = MagicMock(returncode=0)

        with patch.dict(os.environ, {"EXISTING": "1"}):
            run_interactive(["/opt/modctl"], env={"MODCTL_SELF_UPDATED": "1"})

        env = mock_run.call_args.kwargs["env"]
        assert env["EXISTING"] == "1"
        assert env["MODCTL_SELF_UPDATED"] == "1"

    def test_missing_executable(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            run_interactive([str(tmp_path / "missing")])
