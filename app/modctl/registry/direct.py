"""Direct-URL resolver.

Entries with ``source = "url"`` bypass the registry: the download URL and
file name come from the manifest, with the file name synthesized as
``{base-name}-{version}.jar`` when not given.
"""

from modctl.models.artifact import JAR_SUFFIX, ResolvedArtifact
from modctl.models.manifest import ModEntry, ModLoaderType, ModSourceType
from modctl.registry.base import Resolver

LATEST_LABEL = "latest"


def synthesize_file_name(entry: ModEntry) -> str:
    """Build the file name for a direct-url entry without ``fileName``."""
    name = f"{entry.base_name}-{entry.version or LATEST_LABEL}{JAR_SUFFIX}"
    return name.replace("/", "-").replace("\\", "-")


class DirectUrlResolver(Resolver):
    """Resolver for mods downloaded from a fixed URL."""

    @property
    def source(self) -> ModSourceType:
        """Return "url"."""
        return "url"

    def resolve(
        self,
        entry: ModEntry,
        loader: ModLoaderType,
        game_version: str,
    ) -> ResolvedArtifact:
        """Resolve from the entry itself; compatibility filters do not apply."""
        self._check_source(entry)
        return ResolvedArtifact(
            source_url=entry.download_url or "",
            version_label=entry.version or LATEST_LABEL,
            target_file_name=entry.file_name or synthesize_file_name(entry),
        )
