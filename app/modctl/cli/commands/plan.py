"""Plan command implementation.

Shows what a sync would do. Nothing is downloaded or deleted and the
self-update check is skipped.
"""

from pathlib import Path
from typing import Annotated

import typer

from modctl.cli.commands.sync import execute_sync

app = typer.Typer(
    help="Show what sync would change.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def plan_sync(
    ctx: typer.Context,
    manifest: Annotated[
        Path | None,
        typer.Option("--manifest", "-m", help="Manifest file (default: ./modctl.toml)."),
    ] = None,
    mods_dir: Annotated[
        Path | None,
        typer.Option("--mods-dir", "-d", help="Mods directory (default: ./mods)."),
    ] = None,
) -> None:
    """Show the actions sync would take, without changing anything."""
    if ctx.invoked_subcommand is not None:
        return

    execute_sync(
        manifest_path=manifest,
        mods_dir=mods_dir,
        dry_run=True,
        self_update=False,
    )
