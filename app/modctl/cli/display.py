"""Shared Rich display functions for sync reports."""

from rich.table import Table

from modctl.models.action import SyncAction, SyncActionType, SyncOutcome, SyncReport
from modctl.utils.formatting import console, print_success

_ACTION_LABELS: dict[SyncActionType, str] = {
    SyncActionType.KEEP: "[keep]=keep[/keep]",
    SyncActionType.INSTALL: "[install]+install[/install]",
    SyncActionType.REPLACE: "[replace]~replace[/replace]",
    SyncActionType.REMOVE_STALE: "[remove]-stale[/remove]",
    SyncActionType.REMOVE_ORPHAN: "[remove]-orphan[/remove]",
}


def _file_cell(action: SyncAction) -> str:
    if action.action_type is SyncActionType.REPLACE:
        return f"[muted]{action.old_file}[/muted] -> {action.file_name}"
    return action.file_name


def create_actions_table(actions: list[SyncAction], dry_run: bool = False) -> Table:
    """Create a Rich table of sync actions.

    Args:
        actions: Actions to display, in execution order.
        dry_run: Whether the actions are only planned (changes table title).

    Returns:
        Rich Table configured for action display.
    """
    title = "Planned Actions (Dry Run)" if dry_run else "Actions"

    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Action", width=10, justify="center")
    table.add_column("Mod", no_wrap=True)
    table.add_column("File")
    table.add_column("Version", style="muted")

    for action in actions:
        table.add_row(
            _ACTION_LABELS[action.action_type],
            action.mod_name or "[muted]-[/muted]",
            _file_cell(action),
            action.version or "",
        )

    return table


def create_failures_table(outcomes: list[SyncOutcome]) -> Table:
    """Create a Rich table of failed entries.

    Args:
        outcomes: Failed outcomes.

    Returns:
        Rich Table with the mod, error kind and message of each failure.
    """
    table = Table(
        title="Failures",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Mod", no_wrap=True)
    table.add_column("Kind", style="error")
    table.add_column("Message")

    for outcome in outcomes:
        kind = outcome.error_kind.value if outcome.error_kind else "Unknown"
        table.add_row(outcome.mod_name, kind, f"[muted]{outcome.error or ''}[/muted]")

    return table


def print_report_summary(report: SyncReport) -> None:
    """Print counts of downloads, deletions and failures.

    A fully converged report prints a single success line.

    Args:
        report: Sync report.
    """
    kept = sum(1 for a in report.actions if a.action_type is SyncActionType.KEEP)
    downloads = report.downloads
    deletions = report.deletions
    failures = len(report.failures)

    if report.is_converged and not downloads and not deletions:
        print_success(f"Up to date: {kept} mod(s) installed.")
        return

    download_label = "to download" if report.dry_run else "downloaded"
    delete_label = "to delete" if report.dry_run else "deleted"
    parts: list[str] = []
    if kept:
        parts.append(f"[keep]{kept} kept[/keep]")
    if downloads:
        parts.append(f"[install]{downloads} {download_label}[/install]")
    if deletions:
        parts.append(f"[remove]{deletions} {delete_label}[/remove]")
    if failures:
        parts.append(f"[error]{failures} failed[/error]")

    console.print(f"\nSummary: {', '.join(parts)}")


def print_report(report: SyncReport, quiet: bool = False) -> None:
    """Print the actions, failures and summary of a sync report.

    Args:
        report: Sync report.
        quiet: Only print failures and the summary.
    """
    actions = report.actions
    if actions and not quiet:
        console.print(create_actions_table(actions, dry_run=report.dry_run))
    if report.failures:
        console.print(create_failures_table(report.failures))
    print_report_summary(report)
