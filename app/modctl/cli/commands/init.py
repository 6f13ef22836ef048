"""Init command implementation.

Writes the example manifest.
"""

from pathlib import Path
from typing import Annotated

import typer

from modctl.cli.common import load_settings_or_exit, write_example_manifest
from modctl.core.manifest import manifest_exists
from modctl.utils.formatting import print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Create an example manifest.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def init_manifest(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path for manifest file.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing manifest without prompting.",
        ),
    ] = False,
) -> None:
    """Create an example manifest.

    The example declares a mod by registry id, one pinned to a version,
    one by name only, and one downloaded from a URL.

    Examples:
        modctl init                    # Create ./modctl.toml
        modctl init --output pack.toml # Create manifest at custom path
        modctl init --force            # Overwrite existing manifest
    """
    if ctx.invoked_subcommand is not None:
        return

    output_path = output or load_settings_or_exit().manifest

    if manifest_exists(output_path):
        if not force:
            print_error(f"Manifest already exists: {output_path}")
            print_info("Use --force to overwrite or specify a different path with --output.")
            raise typer.Exit(code=1)
        print_warning(f"Overwriting existing manifest: {output_path}")

    saved_path = write_example_manifest(output_path)
    print_success(f"Manifest created: {saved_path}")
