"""Abstract base class for mod resolvers.

This module defines the Resolver interface that every mod source
must implement.
"""

from abc import ABC, abstractmethod

from modctl.models.artifact import ResolvedArtifact
from modctl.models.manifest import ModEntry, ModLoaderType, ModSourceType


class Resolver(ABC):
    """Abstract base class for all mod resolvers.

    A resolver maps a manifest entry plus the manifest's compatibility
    filters to a concrete downloadable artifact.

    Example:
        >>> resolver = ModrinthResolver(client)
        >>> artifact = resolver.resolve(ModEntry(name="Sodium"), "fabric", "1.20.1")
        >>> print(artifact.target_file_name)
    """

    @property
    @abstractmethod
    def source(self) -> ModSourceType:
        """Return the manifest source this resolver handles."""

    @abstractmethod
    def resolve(
        self,
        entry: ModEntry,
        loader: ModLoaderType,
        game_version: str,
    ) -> ResolvedArtifact:
        """Resolve an entry to a downloadable artifact.

        Args:
            entry: Manifest entry to resolve.
            loader: Mod loader filter.
            game_version: Game version filter.

        Returns:
            The artifact to install for this entry.

        Raises:
            ModctlError: A subclass describing why resolution failed.
        """

    def _check_source(self, entry: ModEntry) -> None:
        """Validate that an entry belongs to this resolver.

        Raises:
            ValueError: If the entry's source doesn't match.
        """
        if entry.source != self.source:
            msg = f"Entry source {entry.source} doesn't match resolver source {self.source}"
            raise ValueError(msg)
