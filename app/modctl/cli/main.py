"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from modctl import __version__
from modctl.cli.commands import init, plan, self_update, sync
from modctl.utils.formatting import err_console

app = typer.Typer(
    name="modctl",
    help="Keep a mods directory in sync with a declarative manifest.",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"modctl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route log records to stderr through Rich.

    ``--verbose`` shows debug records, ``--quiet`` only errors.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """modctl - declarative mod management.

    List your mods in modctl.toml and run modctl: missing mods are
    installed, outdated ones replaced, and unlisted ones removed.
    Without a command, runs [bold]sync[/bold].
    """
    configure_logging(verbose, quiet)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    if ctx.invoked_subcommand is None:
        sync.execute_sync(quiet=quiet)


app.add_typer(sync.app, name="sync")
app.add_typer(plan.app, name="plan")
app.add_typer(init.app, name="init")
app.add_typer(self_update.app, name="self-update")


if __name__ == "__main__":
    app()
