"""Sync command implementation.

Runs the self-update check, then converges the mods directory to the
manifest. This is also what ``modctl`` runs without a subcommand.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from modctl.cli.common import (
    apply_remote_manifest,
    load_settings_or_exit,
    open_client,
    require_manifest,
    require_mods_dir,
    run_self_update,
)
from modctl.cli.display import print_report
from modctl.core.reconcile import SyncContext, run_sync
from modctl.models.action import SyncReport
from modctl.registry import get_resolvers
from modctl.utils.formatting import print_info

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Synchronize the mods directory with the manifest.",
    invoke_without_command=True,
)


def execute_sync(
    *,
    manifest_path: Path | None = None,
    mods_dir: Path | None = None,
    dry_run: bool = False,
    prune: bool = True,
    self_update: bool = True,
    quiet: bool = False,
) -> SyncReport:
    """Run the full sync flow.

    Args:
        manifest_path: Manifest file; defaults to the settings value.
        mods_dir: Mods directory; defaults to the settings value.
        dry_run: Plan actions without downloading or deleting.
        prune: Allow the orphan prune pass (the manifest can still disable it).
        self_update: Allow the self-update check (settings can still disable it).
        quiet: Only print failures and the summary.

    Returns:
        The sync report.

    Raises:
        typer.Exit: On configuration errors, first-run manifest creation,
            or after a self-update restart.
    """
    settings = load_settings_or_exit()
    manifest_path = manifest_path or settings.manifest
    mods_dir = mods_dir or settings.mods_dir

    with open_client(settings) as client:
        if self_update and settings.self_update and not dry_run:
            run_self_update(client, settings)

        manifest = require_manifest(manifest_path)
        manifest = apply_remote_manifest(manifest, client)
        if not prune and manifest.prune:
            manifest = manifest.model_copy(update={"prune": False})

        if not dry_run:
            require_mods_dir(mods_dir)

        if not quiet:
            print_info(
                f"Syncing {manifest.mod_count} mod(s) for "
                f"{manifest.mod_loader} {manifest.game_version} into {mods_dir}"
            )

        ctx = SyncContext(
            mods_dir=mods_dir,
            manifest=manifest,
            client=client,
            resolvers=get_resolvers(client, settings.registry_url),
            dry_run=dry_run,
        )
        report = run_sync(ctx)

    print_report(report, quiet=quiet)
    return report


@app.callback(invoke_without_command=True)
def sync_mods(
    ctx: typer.Context,
    manifest: Annotated[
        Path | None,
        typer.Option(
            "--manifest",
            "-m",
            help="Manifest file (default: ./modctl.toml).",
        ),
    ] = None,
    mods_dir: Annotated[
        Path | None,
        typer.Option(
            "--mods-dir",
            "-d",
            help="Mods directory (default: ./mods).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would change without downloading or deleting.",
        ),
    ] = False,
    no_prune: Annotated[
        bool,
        typer.Option(
            "--no-prune",
            help="Keep files that match no manifest entry.",
        ),
    ] = False,
    no_self_update: Annotated[
        bool,
        typer.Option(
            "--no-self-update",
            help="Skip the update check for modctl itself.",
        ),
    ] = False,
) -> None:
    """Synchronize the mods directory with the manifest.

    Every entry is resolved against its registry. Missing mods are
    downloaded, outdated ones replaced, and (unless pruning is off) files
    not listed in the manifest are deleted. Failures of single entries
    are reported without stopping the others.

    Examples:
        modctl sync                   # Converge ./mods to ./modctl.toml
        modctl sync --dry-run         # Preview changes
        modctl sync --no-prune        # Keep unlisted files
        modctl sync -m pack.toml -d instance/mods
    """
    if ctx.invoked_subcommand is not None:
        return

    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    execute_sync(
        manifest_path=manifest,
        mods_dir=mods_dir,
        dry_run=dry_run,
        prune=not no_prune,
        self_update=not no_self_update,
        quiet=quiet,
    )
