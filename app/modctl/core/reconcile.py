"""Reconciliation engine.

Converges the mods directory to the manifest. Each entry is resolved,
compared against a snapshot of the directory taken when the pass starts,
and then kept, installed or replaced. Entry failures are returned as
:class:`~modctl.models.action.SyncOutcome` values so one bad entry never
stops the others. A final prune pass deletes files that match no entry.

File identity is fuzzy: an installed file belongs to an entry when its
normalized stem starts with the entry's normalized name. Entries whose
names are prefixes of each other ("Sodium" and "Sodium Extra") therefore
claim each other's files; this is a known limitation.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from modctl.core.errors import (
    ErrorKind,
    FilesystemError,
    InvalidArtifactError,
    ModctlError,
    UnsupportedSourceError,
)
from modctl.core.validator import validate_artifact
from modctl.models.action import SyncAction, SyncActionType, SyncOutcome, SyncReport
from modctl.models.artifact import JAR_SUFFIX, InstalledFile

if TYPE_CHECKING:
    from modctl.core.http import HttpClient
    from modctl.models.artifact import ResolvedArtifact
    from modctl.models.manifest import Manifest, ModEntry
    from modctl.registry.base import Resolver

logger = logging.getLogger(__name__)

# Downloads are written here first and renamed into place once validated
PART_SUFFIX = ".part"


@dataclass(frozen=True, slots=True)
class SyncContext:
    """Everything a sync pass needs, passed explicitly.

    Attributes:
        mods_dir: Directory being converged.
        manifest: Desired state; its loader and game version filter every resolution.
        client: HTTP client used for downloads.
        resolvers: Resolver per manifest source.
        dry_run: Plan actions without touching the directory.
    """

    mods_dir: Path
    manifest: Manifest
    client: HttpClient
    resolvers: Mapping[str, Resolver]
    dry_run: bool = False


@dataclass(slots=True)
class DirectorySnapshot:
    """Directory listing taken at the start of a pass.

    The listing is never refreshed, so files installed during the pass are
    invisible to later entries and to the prune pass. Deletions are tracked
    so no file is deleted twice.

    Attributes:
        files: Mod files present when the pass started.
        removed: Names of files deleted during the pass.
    """

    files: tuple[InstalledFile, ...]
    removed: set[str] = field(default_factory=set)

    @classmethod
    def scan(cls, mods_dir: Path) -> DirectorySnapshot:
        """List the mod files currently in ``mods_dir``."""
        return cls(files=tuple(list_installed(mods_dir)))

    def present(self) -> list[InstalledFile]:
        """Snapshot files not removed during the pass."""
        return [f for f in self.files if f.name not in self.removed]


def list_installed(mods_dir: Path) -> list[InstalledFile]:
    """List mod archives in a directory.

    Only regular ``*.jar`` files directly inside ``mods_dir`` are
    returned, sorted by name. A missing directory yields an empty list.

    Args:
        mods_dir: Directory to list.

    Returns:
        Installed files with their sizes.
    """
    if not mods_dir.is_dir():
        return []

    files: list[InstalledFile] = []
    for entry in os.scandir(mods_dir):
        if entry.is_file() and entry.name.lower().endswith(JAR_SUFFIX):
            files.append(InstalledFile(name=entry.name, size_bytes=entry.stat().st_size))
    files.sort(key=lambda f: f.name)
    return files


def find_stale(
    entry: ModEntry,
    expected_name: str,
    files: list[InstalledFile],
) -> list[InstalledFile]:
    """Find installed variants of an entry other than the expected file.

    Args:
        entry: Manifest entry.
        expected_name: File name the entry resolves to.
        files: Files to search.

    Returns:
        Files whose normalized stem starts with the entry's normalized
        name but whose name differs from ``expected_name``.
    """
    base = entry.base_name
    return [f for f in files if f.base_name.startswith(base) and f.name != expected_name]


def is_orphan(file: InstalledFile, base_names: list[str]) -> bool:
    """Check if a file matches no manifest entry.

    Args:
        file: Installed file.
        base_names: Normalized names of all manifest entries.

    Returns:
        True if no entry name occurs in the file's normalized stem.
    """
    return not any(base in file.base_name for base in base_names)


def find_orphans(
    manifest: Manifest,
    files: list[InstalledFile],
    expected: Collection[str] = (),
) -> list[InstalledFile]:
    """Files that match no entry of the manifest.

    Args:
        manifest: Desired state.
        files: Files to search.
        expected: File names the entries resolved to. These are never
            orphans, even when the registry's file name does not contain
            the entry's name ("Mod Menu" installs ``modmenu-7.2.2.jar``).

    Returns:
        Files that are neither expected nor matched by an entry name.
    """
    base_names = manifest.base_names
    return [f for f in files if f.name not in expected and is_orphan(f, base_names)]


def resolve_entry(ctx: SyncContext, entry: ModEntry) -> ResolvedArtifact:
    """Resolve an entry with the resolver for its source.

    Raises:
        UnsupportedSourceError: If no resolver handles the entry's source.
        ModctlError: Any resolution failure.
    """
    resolver = ctx.resolvers.get(entry.source)
    if resolver is None:
        raise UnsupportedSourceError(f"No resolver for source '{entry.source}'")
    return resolver.resolve(entry, ctx.manifest.mod_loader, ctx.manifest.game_version)


def _delete(ctx: SyncContext, name: str) -> None:
    """Delete a file from the mods directory (no-op in dry-run)."""
    if ctx.dry_run:
        return
    try:
        (ctx.mods_dir / name).unlink(missing_ok=True)
    except OSError as e:
        raise FilesystemError(f"Cannot delete {name}: {e}") from e


def _install(ctx: SyncContext, artifact: ResolvedArtifact) -> None:
    """Download, validate and move an artifact into place.

    The download goes to a ``.part`` sibling so an interrupted or invalid
    download never occupies the final file name.

    Raises:
        NetworkError: If the download fails.
        InvalidArtifactError: If the downloaded file is not an archive.
        FilesystemError: If the file cannot be written or renamed.
    """
    target = ctx.mods_dir / artifact.target_file_name
    part = target.with_name(target.name + PART_SUFFIX)

    logger.info("Downloading %s from %s", artifact.target_file_name, artifact.source_url)
    ctx.client.download(artifact.source_url, part)

    try:
        validate_artifact(part)
    except InvalidArtifactError:
        part.unlink(missing_ok=True)
        raise

    try:
        os.replace(part, target)
    except OSError as e:
        part.unlink(missing_ok=True)
        raise FilesystemError(f"Cannot move {part.name} into place: {e}") from e


def _apply_entry(
    ctx: SyncContext,
    entry: ModEntry,
    artifact: ResolvedArtifact,
    snapshot: DirectorySnapshot,
    actions: list[SyncAction],
) -> None:
    """Converge one entry, appending completed actions to ``actions``."""
    expected = artifact.target_file_name
    target = ctx.mods_dir / expected
    stale = find_stale(entry, expected, snapshot.present())

    def remove_stale(files: list[InstalledFile]) -> None:
        for f in files:
            logger.info("Removing stale variant %s of %s", f.name, entry.name)
            _delete(ctx, f.name)
            snapshot.removed.add(f.name)
            actions.append(
                SyncAction(SyncActionType.REMOVE_STALE, f.name, mod_name=entry.name)
            )

    if target.is_file() and target.stat().st_size > 0:
        actions.append(
            SyncAction(
                SyncActionType.KEEP,
                expected,
                mod_name=entry.name,
                version=artifact.version_label,
            )
        )
        remove_stale(stale)
        return

    if target.exists():
        logger.info("Removing empty file %s", expected)
        _delete(ctx, expected)
        snapshot.removed.add(expected)

    if not ctx.dry_run:
        _install(ctx, artifact)

    if stale:
        actions.append(
            SyncAction(
                SyncActionType.REPLACE,
                expected,
                mod_name=entry.name,
                old_file=stale[0].name,
                version=artifact.version_label,
            )
        )
        _delete(ctx, stale[0].name)
        snapshot.removed.add(stale[0].name)
        remove_stale(stale[1:])
    else:
        actions.append(
            SyncAction(
                SyncActionType.INSTALL,
                expected,
                mod_name=entry.name,
                version=artifact.version_label,
            )
        )


def sync_entry(ctx: SyncContext, entry: ModEntry, snapshot: DirectorySnapshot) -> SyncOutcome:
    """Reconcile one manifest entry.

    The entry is always re-resolved so upstream updates are picked up
    even when a file is already installed. Stale variants are removed
    only once the expected file is in place, so a failed download never
    costs the working version.

    Args:
        ctx: Sync context.
        entry: Entry to reconcile.
        snapshot: Directory snapshot shared by the pass.

    Returns:
        The entry's outcome; failures are reported, never raised.
    """
    actions: list[SyncAction] = []
    artifact: ResolvedArtifact | None = None

    try:
        artifact = resolve_entry(ctx, entry)
        _apply_entry(ctx, entry, artifact, snapshot, actions)
    except ModctlError as e:
        logger.info("%s failed: %s", entry.name, e)
        return SyncOutcome(entry.name, tuple(actions), artifact, e.kind, str(e))
    except OSError as e:
        logger.info("%s failed: %s", entry.name, e)
        return SyncOutcome(
            entry.name, tuple(actions), artifact, ErrorKind.FILESYSTEM_FAILURE, str(e)
        )

    return SyncOutcome(entry.name, tuple(actions), artifact)


def prune_orphans(
    ctx: SyncContext,
    snapshot: DirectorySnapshot,
    expected: Collection[str] = (),
) -> list[SyncAction]:
    """Delete snapshot files that match no manifest entry.

    Does nothing unless the manifest enables pruning. Files installed
    during the pass are not in the snapshot and are never pruned.

    Args:
        ctx: Sync context.
        snapshot: Directory snapshot shared by the pass.
        expected: File names resolved for entries in this pass.

    Returns:
        REMOVE_ORPHAN actions for the files deleted.
    """
    if not ctx.manifest.prune:
        return []

    actions: list[SyncAction] = []

    for f in find_orphans(ctx.manifest, snapshot.present(), expected):
        try:
            _delete(ctx, f.name)
        except FilesystemError as e:
            logger.warning("Could not prune %s: %s", f.name, e)
            continue
        logger.info("Pruned orphan %s", f.name)
        snapshot.removed.add(f.name)
        actions.append(SyncAction(SyncActionType.REMOVE_ORPHAN, f.name))

    return actions


def run_sync(ctx: SyncContext) -> SyncReport:
    """Run a full sync pass.

    Entries are processed sequentially in manifest order, then orphans
    are pruned.

    Args:
        ctx: Sync context.

    Returns:
        Report with every entry's outcome and the pruned files.
    """
    snapshot = DirectorySnapshot.scan(ctx.mods_dir)
    logger.info(
        "Syncing %d mod(s) into %s (%d file(s) present)",
        ctx.manifest.mod_count,
        ctx.mods_dir,
        len(snapshot.files),
    )

    report = SyncReport(dry_run=ctx.dry_run)
    for entry in ctx.manifest.mods:
        report.outcomes.append(sync_entry(ctx, entry, snapshot))

    expected = {o.artifact.target_file_name for o in report.outcomes if o.artifact is not None}
    report.orphans.extend(prune_orphans(ctx, snapshot, expected))
    return report
