"""DevOps tasks for modctl.

Usage: uv run devops.py <task>
Tasks: fmt, test, clean, stamp-release
"""

import re
import subprocess
import sys
from pathlib import Path

BUILD_FLAG_FILE = Path(__file__).parent / "app" / "modctl" / "_build.py"


def _run(commands: list[list[str]]) -> None:
    """Execute a sequence of shell commands, exiting on first failure."""
    for cmd in commands:
        try:
            subprocess.run(cmd, check=True)  # nosec: B603, B607
        except subprocess.CalledProcessError as e:
            print(f"Command failed: {' '.join(e.cmd)}", file=sys.stderr)
            sys.exit(e.returncode)


def format_code() -> None:
    """Format the codebase with Ruff."""
    _run(
        [
            ["ruff", "format", "."],
            ["ruff", "check", "--fix", "."],
        ]
    )


def test() -> None:
    """Run tests with PyTest."""
    _run([["uv", "run", "pytest", "-q"]])


def clean() -> None:
    """Remove caches and build artifacts."""
    _run(
        [
            ["find", ".", "-type", "d", "-name", "__pycache__", "-exec", "rm", "-rf", "{}", "+"],
            ["find", ".", "-type", "f", "-name", "*.pyc", "-delete"],
            ["rm", "-rf", ".pytest_cache", ".ruff_cache", "dist", "build"],
        ]
    )


def stamp_release() -> None:
    """Mark the source tree as a release build before packaging the executable.

    Release builds check for and install newer versions at startup; the
    stamped file must not be committed.
    """
    source = BUILD_FLAG_FILE.read_text(encoding="utf-8")
    stamped, count = re.subn(
        r'^BUILD_MODE: BuildMode = "dev"$',
        'BUILD_MODE: BuildMode = "release"',
        source,
        flags=re.MULTILINE,
    )
    if count != 1:
        print(f"Build flag not found in {BUILD_FLAG_FILE}", file=sys.stderr)
        sys.exit(1)
    BUILD_FLAG_FILE.write_text(stamped, encoding="utf-8")
    print(f"Stamped release build in {BUILD_FLAG_FILE}")


TASKS = {
    "fmt": format_code,
    "test": test,
    "clean": clean,
    "stamp-release": stamp_release,
}


if __name__ == "__main__":
    if len(sys.argv) != 2 or sys.argv[1] not in TASKS:
        print(__doc__, file=sys.stderr)
        sys.exit(2)
    TASKS[sys.argv[1]]()
