"""Subprocess execution utilities."""

import os
import subprocess


def run_interactive(
    args: list[str],
    *,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> int:
    """Execute a command interactively, inheriting the terminal.

    stdout and stderr are not captured, so the child writes straight to
    the user's terminal and reads from its stdin.

    Args:
        args: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Additional environment variables (merged with current env).

    Returns:
        Exit code of the command.

    Raises:
        FileNotFoundError: If command executable is not found.
        OSError: If command cannot be executed.
    """
    full_env = {**os.environ, **(env or {})}
    result = subprocess.run(
        args,
        check=False,
        cwd=cwd,
        env=full_env,
    )
    return result.returncode
