"""Self-update state machine.

A run moves through::

    IDLE -> CHECKING_REMOTE -> UP_TO_DATE
                            -> UPDATE_AVAILABLE -> DOWNLOADING -> SWAPPING -> RESTARTING

Dev builds stop at SKIPPED. Any failure other than a failed rollback ends
in FAILED and the current executable keeps running. A failed rollback
raises :class:`~modctl.core.errors.RollbackFailedError`.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from modctl import __version__
from modctl._build import BuildMode, get_build_mode
from modctl.core.errors import ErrorKind, ModctlError, RollbackFailedError
from modctl.core.paths import APP_NAME, get_backup_path, get_staging_path
from modctl.update.feed import fetch_latest_release, is_newer
from modctl.update.platform import normalize_platform, select_asset
from modctl.update.swap import cleanup_backup, download_release, swap_executable
from modctl.utils.shell import run_interactive

if TYPE_CHECKING:
    from modctl.core.http import HttpClient

logger = logging.getLogger(__name__)

# Set for the restarted child so it does not update again
RESTARTED_ENV = "MODCTL_SELF_UPDATED"

Runner = Callable[..., int]


class UpdateState(str, Enum):
    """States of a self-update run."""

    IDLE = "idle"
    CHECKING_REMOTE = "checking-remote"
    UP_TO_DATE = "up-to-date"
    UPDATE_AVAILABLE = "update-available"
    DOWNLOADING = "downloading"
    SWAPPING = "swapping"
    RESTARTING = "restarting"
    ROLLBACK_FAILED = "rollback-failed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class UpdateResult:
    """Outcome of a self-update run.

    Attributes:
        state: Final state.
        tag: Release tag seen on the feed, if the feed was reached.
        exit_code: Exit code of the restarted executable (RESTARTING only).
        error_kind: Failure classification (FAILED only).
        error: Failure message (FAILED only).
    """

    state: UpdateState
    tag: str | None = None
    exit_code: int | None = None
    error_kind: ErrorKind | None = None
    error: str | None = None

    @property
    def restarted(self) -> bool:
        """Check if the updated executable was run."""
        return self.state is UpdateState.RESTARTING


def current_executable() -> Path:
    """Path of the running executable.

    Frozen builds report their own binary as ``sys.executable``; otherwise
    the script path is used.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve()
    return Path(sys.argv[0]).resolve()


class SelfUpdater:
    """Checks the release feed and replaces the running executable.

    All environment lookups are injectable so the machine can be driven
    from tests.
    """

    def __init__(
        self,
        client: HttpClient,
        repo: str,
        *,
        current_version: str = __version__,
        executable: Path | None = None,
        build_mode: BuildMode | None = None,
        system: str | None = None,
        machine: str | None = None,
        app_name: str = APP_NAME,
        runner: Runner = run_interactive,
    ) -> None:
        self._client = client
        self._repo = repo
        self._current_version = current_version
        self._executable = executable or current_executable()
        self._build_mode = build_mode or get_build_mode()
        self._system = system
        self._machine = machine
        self._app_name = app_name
        self._runner = runner
        self.state = UpdateState.IDLE

    @property
    def executable(self) -> Path:
        return self._executable

    def _enter(self, state: UpdateState) -> None:
        logger.debug("Self-update: %s -> %s", self.state.value, state.value)
        self.state = state

    def run(self, args: list[str]) -> UpdateResult:
        """Run the update check and, if newer, install and restart.

        Args:
            args: Command-line arguments to pass to the restarted executable.

        Returns:
            The final state. On RESTARTING, ``exit_code`` holds the new
            executable's exit code and the caller should exit with it.

        Raises:
            RollbackFailedError: If the swap failed and the previous
                executable could not be restored.
        """
        cleanup_backup(get_backup_path(self._executable))

        if self._build_mode != "release":
            logger.debug("Dev build, skipping self-update")
            self._enter(UpdateState.SKIPPED)
            return UpdateResult(UpdateState.SKIPPED)

        if os.environ.get(RESTARTED_ENV):
            logger.debug("Restarted after update, skipping self-update")
            self._enter(UpdateState.SKIPPED)
            return UpdateResult(UpdateState.SKIPPED)

        tag: str | None = None
        try:
            self._enter(UpdateState.CHECKING_REMOTE)
            descriptor = fetch_latest_release(self._client, self._repo)
            tag = descriptor.tag

            if not is_newer(tag, self._current_version):
                self._enter(UpdateState.UP_TO_DATE)
                return UpdateResult(UpdateState.UP_TO_DATE, tag=tag)

            self._enter(UpdateState.UPDATE_AVAILABLE)
            logger.info("Update available: %s -> %s", self._current_version, tag)
            os_name, arch = normalize_platform(self._system, self._machine)
            selected = select_asset(descriptor, self._app_name, os_name, arch)

            self._enter(UpdateState.DOWNLOADING)
            staging = get_staging_path(self._executable)
            download_release(self._client, selected, staging)

            self._enter(UpdateState.SWAPPING)
            swap_executable(self._executable, staging, get_backup_path(self._executable))
        except RollbackFailedError:
            self._enter(UpdateState.ROLLBACK_FAILED)
            raise
        except ModctlError as e:
            logger.info("Self-update failed: %s", e)
            self._enter(UpdateState.FAILED)
            return UpdateResult(UpdateState.FAILED, tag=tag, error_kind=e.kind, error=str(e))

        self._enter(UpdateState.RESTARTING)
        logger.info("Updated to %s, restarting", tag)
        try:
            exit_code = self._runner(
                [str(self._executable), *args],
                env={RESTARTED_ENV: "1"},
            )
        except OSError as e:
            logger.info("Could not start updated executable: %s", e)
            self._enter(UpdateState.FAILED)
            return UpdateResult(
                UpdateState.FAILED,
                tag=tag,
                error_kind=ErrorKind.FILESYSTEM_FAILURE,
                error=str(e),
            )
        return UpdateResult(UpdateState.RESTARTING, tag=tag, exit_code=exit_code)
