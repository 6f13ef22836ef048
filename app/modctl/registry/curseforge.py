"""CurseForge resolver placeholder.

CurseForge downloads need an API key and are not implemented; entries
using this source fail fast so the rest of the pass still runs.
"""

from modctl.core.errors import UnsupportedSourceError
from modctl.models.artifact import ResolvedArtifact
from modctl.models.manifest import ModEntry, ModLoaderType, ModSourceType
from modctl.registry.base import Resolver


class CurseForgeResolver(Resolver):
    """Resolver that rejects every CurseForge entry."""

    @property
    def source(self) -> ModSourceType:
        """Return "curseforge"."""
        return "curseforge"

    def resolve(
        self,
        entry: ModEntry,
        loader: ModLoaderType,
        game_version: str,
    ) -> ResolvedArtifact:
        """Always fail with UnsupportedSourceError."""
        self._check_source(entry)
        raise UnsupportedSourceError(
            f"CurseForge is not supported (mod '{entry.name}'); use source 'modrinth' or 'url'"
        )
