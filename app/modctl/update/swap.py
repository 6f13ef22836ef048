"""Executable replacement on disk.

The running executable is renamed to ``<exe>.old`` and the staged
download at ``<exe>.new`` is renamed into its place. Renaming a running
binary is allowed on every supported OS; overwriting it in place is not.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from modctl.core.errors import FilesystemError, RollbackFailedError

if TYPE_CHECKING:
    from modctl.core.http import HttpClient
    from modctl.models.release import PlatformAsset

logger = logging.getLogger(__name__)


def cleanup_backup(backup: Path) -> None:
    """Remove the backup left by a previous update, best effort."""
    try:
        backup.unlink()
    except FileNotFoundError:
        return
    except OSError as e:
        logger.debug("Could not remove old executable %s: %s", backup, e)
        return
    logger.debug("Removed old executable %s", backup)


def make_executable(path: Path) -> None:
    """Add execute permission for everyone who can read the file.

    Raises:
        FilesystemError: If the mode cannot be changed.
    """
    try:
        mode = path.stat().st_mode
        path.chmod(mode | ((mode & 0o444) >> 2) | stat.S_IXUSR)
    except OSError as e:
        raise FilesystemError(f"Cannot make {path} executable: {e}") from e


def download_release(client: HttpClient, selected: PlatformAsset, staging: Path) -> int:
    """Download a release asset to the staging path.

    Args:
        client: HTTP client.
        selected: Asset to download.
        staging: Destination, next to the executable.

    Returns:
        Number of bytes written.

    Raises:
        NetworkError: If the download fails.
        FilesystemError: If the file cannot be written or made executable.
    """
    written = client.download(selected.asset.url, staging)
    if not selected.is_windows:
        try:
            make_executable(staging)
        except FilesystemError:
            staging.unlink(missing_ok=True)
            raise
    return written


def swap_executable(executable: Path, staging: Path, backup: Path) -> None:
    """Replace the executable with the staged file.

    Args:
        executable: Running executable.
        staging: Downloaded replacement.
        backup: Where the running executable is moved.

    Raises:
        FilesystemError: If the swap failed and the original executable is
            in place again.
        RollbackFailedError: If the swap failed and the original executable
            could not be restored.
    """
    try:
        os.replace(executable, backup)
    except OSError as e:
        staging.unlink(missing_ok=True)
        raise FilesystemError(f"Cannot move {executable} aside: {e}") from e

    try:
        os.replace(staging, executable)
    except OSError as e:
        logger.warning("Installing %s failed, restoring previous executable", staging)
        try:
            os.replace(backup, executable)
        except OSError as restore_error:
            raise RollbackFailedError(executable, backup, restore_error) from e
        staging.unlink(missing_ok=True)
        raise FilesystemError(f"Cannot install {staging}: {e}") from e
