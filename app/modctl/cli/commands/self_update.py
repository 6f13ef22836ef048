"""Self-update command implementation."""

import typer

from modctl import __version__
from modctl.cli.common import load_settings_or_exit, open_client, run_self_update
from modctl.update import UpdateState
from modctl.utils.formatting import print_info, print_success

app = typer.Typer(
    help="Update modctl to the latest release.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def self_update(ctx: typer.Context) -> None:
    """Check for a newer modctl release and install it.

    After a successful update the new executable is run once with
    ``--version`` to show the installed version.
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = load_settings_or_exit()
    with open_client(settings) as client:
        result = run_self_update(client, settings, args=["--version"])

    if result.state is UpdateState.SKIPPED:
        print_info("Self-update is disabled for development builds.")
    elif result.state is UpdateState.UP_TO_DATE:
        print_success(f"modctl {__version__} is up to date (latest release: {result.tag}).")
    elif result.state is UpdateState.FAILED:
        raise typer.Exit(code=1)
