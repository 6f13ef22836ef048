"""Sync action models.

This module defines data structures for the filesystem actions the
reconciliation engine takes and the per-entry outcomes it reports.
"""

from dataclasses import dataclass, field
from enum import Enum

from modctl.core.errors import ErrorKind
from modctl.models.artifact import ResolvedArtifact


class SyncActionType(Enum):
    """Type of reconciliation action.

    Attributes:
        KEEP: Expected file already installed, nothing to do.
        INSTALL: Expected file downloaded, no previous variant existed.
        REPLACE: Expected file downloaded in place of an older variant.
        REMOVE_STALE: Older or duplicate variant of a manifest mod deleted.
        REMOVE_ORPHAN: File matching no manifest entry deleted by pruning.
    """

    KEEP = "keep"
    INSTALL = "install"
    REPLACE = "replace"
    REMOVE_STALE = "remove-stale"
    REMOVE_ORPHAN = "remove-orphan"


@dataclass(frozen=True, slots=True)
class SyncAction:
    """A single action taken (or planned) on the mods directory.

    Attributes:
        action_type: What was done.
        file_name: File the action applies to.
        mod_name: Manifest entry the action belongs to (None for orphans).
        old_file: Variant that was replaced (REPLACE only).
        version: Version label of the installed artifact, if known.
    """

    action_type: SyncActionType
    file_name: str
    mod_name: str | None = None
    old_file: str | None = None
    version: str | None = None

    def __post_init__(self) -> None:
        """Validate action data after initialization."""
        if not self.file_name:
            msg = "File name cannot be empty"
            raise ValueError(msg)
        if self.action_type == SyncActionType.REPLACE and not self.old_file:
            msg = "Replace action requires old_file"
            raise ValueError(msg)

    @property
    def is_download(self) -> bool:
        """Check if this action downloads a file."""
        return self.action_type in (SyncActionType.INSTALL, SyncActionType.REPLACE)

    @property
    def is_deletion(self) -> bool:
        """Check if this action deletes a file."""
        return self.action_type in (SyncActionType.REMOVE_STALE, SyncActionType.REMOVE_ORPHAN)


@dataclass(frozen=True, slots=True)
class SyncOutcome:
    """Result of reconciling one manifest entry.

    Failures are carried as values: ``error_kind`` and ``error`` are set
    and ``actions`` lists whatever was completed before the failure.

    Attributes:
        mod_name: Manifest entry name.
        actions: Actions taken for this entry, in order.
        artifact: Resolved artifact, if resolution succeeded.
        error_kind: Kind of failure, None on success.
        error: Human-readable failure message, None on success.
    """

    mod_name: str
    actions: tuple[SyncAction, ...] = ()
    artifact: ResolvedArtifact | None = None
    error_kind: ErrorKind | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        """Check if the entry converged."""
        return self.error_kind is None

    @property
    def failed(self) -> bool:
        """Check if the entry failed."""
        return not self.success


@dataclass(slots=True)
class SyncReport:
    """Aggregated result of a sync pass.

    Attributes:
        outcomes: Per-entry outcomes in manifest order.
        orphans: REMOVE_ORPHAN actions from the prune pass.
        dry_run: Whether the pass only planned actions.
    """

    outcomes: list[SyncOutcome] = field(default_factory=list)
    orphans: list[SyncAction] = field(default_factory=list)
    dry_run: bool = False

    @property
    def actions(self) -> list[SyncAction]:
        """All actions of the pass, entries first, then orphans."""
        result = [action for outcome in self.outcomes for action in outcome.actions]
        result.extend(self.orphans)
        return result

    @property
    def failures(self) -> list[SyncOutcome]:
        """Outcomes of entries that failed."""
        return [o for o in self.outcomes if o.failed]

    @property
    def downloads(self) -> int:
        """Number of files downloaded (or planned to be)."""
        return sum(1 for a in self.actions if a.is_download)

    @property
    def deletions(self) -> int:
        """Number of files deleted (or planned to be)."""
        return sum(1 for a in self.actions if a.is_deletion)

    @property
    def is_converged(self) -> bool:
        """Check if every entry succeeded."""
        return not self.failures
