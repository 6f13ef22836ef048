"""Helpers shared by the CLI commands.

Each helper turns a library failure into a user-facing message and a
``typer.Exit`` with the matching exit code.
"""

from __future__ import annotations

import sys
from pathlib import Path

import typer

from modctl.core.config import ModctlSettings, SettingsError, load_settings
from modctl.core.errors import RollbackFailedError
from modctl.core.http import HttpClient
from modctl.core.manifest import (
    ManifestError,
    RemoteManifestError,
    create_example_manifest,
    fetch_remote_manifest,
    load_manifest,
    manifest_exists,
    save_manifest,
)
from modctl.core.paths import ensure_mods_dir
from modctl.models.manifest import Manifest
from modctl.update import SelfUpdater, UpdateResult, UpdateState
from modctl.utils.formatting import print_error, print_info, print_success, print_warning

# Exit code when the executable could not be restored after a failed update
ROLLBACK_EXIT_CODE = 70


def load_settings_or_exit() -> ModctlSettings:
    """Load user settings.

    Raises:
        typer.Exit: With code 1 if the settings file is invalid.
    """
    try:
        return load_settings()
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def open_client(settings: ModctlSettings) -> HttpClient:
    """Create the HTTP client configured by the settings."""
    return HttpClient(timeout=settings.timeout_seconds, retries=settings.retries)


def run_self_update(
    client: HttpClient,
    settings: ModctlSettings,
    args: list[str] | None = None,
) -> UpdateResult:
    """Run the self-updater and handle its terminal states.

    Args:
        client: HTTP client.
        settings: User settings.
        args: Arguments for the restarted executable. Defaults to the
            current command line.

    Returns:
        The update result when this process should keep running.

    Raises:
        typer.Exit: With the child's exit code after a restart, or with
            ROLLBACK_EXIT_CODE if the installation was left broken.
    """
    updater = SelfUpdater(client, settings.release_repo)
    try:
        result = updater.run(sys.argv[1:] if args is None else args)
    except RollbackFailedError as e:
        print_error(str(e))
        print_error(f"Restore it manually: move {e.backup} back to {e.executable}")
        raise typer.Exit(code=ROLLBACK_EXIT_CODE) from e

    if result.state is UpdateState.RESTARTING:
        raise typer.Exit(code=result.exit_code or 0)
    if result.state is UpdateState.FAILED:
        print_warning(f"Self-update failed, continuing with the current version: {result.error}")
    return result


def write_example_manifest(path: Path) -> Path:
    """Write the example manifest.

    Raises:
        typer.Exit: With code 1 if the file cannot be written.
    """
    try:
        return save_manifest(create_example_manifest(), path)
    except ManifestError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def require_manifest(path: Path) -> Manifest:
    """Load the manifest, creating the example on first run.

    Raises:
        typer.Exit: With code 0 after writing the example manifest, or
            code 1 if the manifest is invalid.
    """
    if not manifest_exists(path):
        saved = write_example_manifest(path)
        print_success(f"Created example manifest: {saved}")
        print_info("Edit it to list your mods, then run modctl again.")
        raise typer.Exit(code=0)

    try:
        return load_manifest(path)
    except ManifestError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def apply_remote_manifest(manifest: Manifest, client: HttpClient) -> Manifest:
    """Overlay the external manifest, falling back to the local one on failure."""
    try:
        return fetch_remote_manifest(manifest, client)
    except RemoteManifestError as e:
        print_warning(f"{e}. Using the local manifest.")
        return manifest


def require_mods_dir(path: Path) -> Path:
    """Create the mods directory.

    Raises:
        typer.Exit: With code 1 if it cannot be created.
    """
    try:
        return ensure_mods_dir(path)
    except RuntimeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
