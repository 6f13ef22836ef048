"""Modrinth resolver.

Resolves manifest entries against the Modrinth v2 API: name-based
project discovery through ``/search`` and version selection through
``/project/{id}/version``.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from modctl.core.config import DEFAULT_REGISTRY_URL
from modctl.core.errors import NetworkError, RegistryNotFoundError, VersionIncompatibleError
from modctl.models.artifact import ResolvedArtifact
from modctl.registry.base import Resolver

if TYPE_CHECKING:
    from modctl.core.http import HttpClient
    from modctl.models.manifest import ModEntry, ModLoaderType, ModSourceType

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


def _strip_v(label: str) -> str:
    """Drop an optional leading 'v' from a version label."""
    return label[1:] if label[:1] in ("v", "V") else label


def select_hit(hits: list[dict[str, Any]], query: str) -> dict[str, Any]:
    """Pick the best search hit for a mod name.

    Rules, first match wins:
    1. Title or slug equals the query (case-insensitive).
    2. Title contains the query, or the query contains the title.
    3. First hit (the registry ranks by relevance).

    Args:
        hits: Non-empty list of search hits in registry order.
        query: Mod name searched for.

    Returns:
        The selected hit.
    """
    wanted = query.lower()

    for hit in hits:
        title = str(hit.get("title", "")).lower()
        slug = str(hit.get("slug", "")).lower()
        if wanted in (title, slug):
            return hit

    for hit in hits:
        title = str(hit.get("title", "")).lower()
        if title and (wanted in title or title in wanted):
            return hit

    return hits[0]


def is_compatible(version: dict[str, Any], loader: str, game_version: str) -> bool:
    """Check whether a version record supports the loader and game version."""
    return game_version in (version.get("game_versions") or []) and loader in (
        version.get("loaders") or []
    )


def select_version(
    versions: list[dict[str, Any]],
    loader: str,
    game_version: str,
    pinned: str | None = None,
) -> dict[str, Any]:
    """Pick the version record to install.

    Without a pin, the first compatible version wins (the registry lists
    newest first). With a pin, the compatible version whose label equals
    the pin wins; if none does, labels are compared again ignoring a
    leading 'v' on either side.

    Args:
        versions: Version records in registry order.
        loader: Mod loader filter.
        game_version: Game version filter.
        pinned: Requested version label, if any.

    Returns:
        The selected version record.

    Raises:
        VersionIncompatibleError: If no version matches.
    """
    compatible = [v for v in versions if is_compatible(v, loader, game_version)]

    if pinned is None:
        if not compatible:
            msg = f"No version compatible with {loader} {game_version}"
            raise VersionIncompatibleError(msg)
        return compatible[0]

    for version in compatible:
        if version.get("version_number") == pinned:
            return version

    normalized = _strip_v(pinned)
    for version in compatible:
        if _strip_v(str(version.get("version_number", ""))) == normalized:
            return version

    msg = f"Version {pinned} not found or not compatible with {loader} {game_version}"
    raise VersionIncompatibleError(msg)


def artifact_from_version(version: dict[str, Any]) -> ResolvedArtifact:
    """Build the artifact from the first file of a version record.

    Raises:
        NetworkError: If the record has no usable file.
    """
    files = version.get("files") or []
    if not files:
        raise NetworkError(f"Malformed version record {version.get('id')}: no files")

    primary = files[0] if isinstance(files[0], dict) else {}
    url = primary.get("url")
    filename = primary.get("filename")
    if not isinstance(url, str) or not isinstance(filename, str) or not filename:
        raise NetworkError(f"Malformed version record {version.get('id')}: bad file entry")

    try:
        return ResolvedArtifact(
            source_url=url,
            version_label=str(version.get("version_number", "")),
            target_file_name=filename,
        )
    except ValueError as e:
        raise NetworkError(f"Malformed version record {version.get('id')}: {e}") from e


class ModrinthResolver(Resolver):
    """Resolver backed by the Modrinth registry.

    Attributes:
        _client: HTTP client used for all registry calls.
        _base_url: API base URL without trailing slash.
    """

    def __init__(self, client: HttpClient, base_url: str = DEFAULT_REGISTRY_URL) -> None:
        """Initialize the resolver.

        Args:
            client: HTTP client to use.
            base_url: Modrinth API base URL.
        """
        self._client = client
        self._base_url = base_url.rstrip("/")

    @property
    def source(self) -> ModSourceType:
        """Return "modrinth"."""
        return "modrinth"

    def resolve(
        self,
        entry: ModEntry,
        loader: ModLoaderType,
        game_version: str,
    ) -> ResolvedArtifact:
        """Resolve an entry through search (if needed) and version listing."""
        self._check_source(entry)

        project_id = entry.project_id or self.search_project(entry.name, loader, game_version)
        versions = self.list_versions(project_id)
        version = select_version(versions, loader, game_version, entry.version)
        artifact = artifact_from_version(version)

        logger.debug(
            "Resolved %s -> %s %s (%s)",
            entry.name,
            project_id,
            artifact.version_label,
            artifact.target_file_name,
        )
        return artifact

    def search_project(self, name: str, loader: str, game_version: str) -> str:
        """Find the project id for a mod name.

        Args:
            name: Mod name to search for.
            loader: Mod loader facet.
            game_version: Game version facet.

        Returns:
            The selected project's id.

        Raises:
            RegistryNotFoundError: If the search has no hits.
            NetworkError: On request failure or malformed response.
        """
        params = {
            "query": name,
            "facets": json.dumps([[f"categories:{loader}"], [f"versions:{game_version}"]]),
            "limit": str(SEARCH_LIMIT),
        }
        data = self._client.get_json(f"{self._base_url}/search", params)

        if not isinstance(data, dict) or not isinstance(data.get("hits"), list):
            raise NetworkError(f"Malformed search response for '{name}'")

        hits: list[dict[str, Any]] = [h for h in data["hits"] if isinstance(h, dict)]
        if not hits:
            raise RegistryNotFoundError(f"No projects found for '{name}'")

        hit = select_hit(hits, name)
        project_id = hit.get("project_id")
        if not isinstance(project_id, str) or not project_id:
            raise NetworkError(f"Malformed search hit for '{name}': missing project_id")

        logger.info("Found project '%s' (%s) for '%s'", hit.get("title"), project_id, name)
        if loader not in (hit.get("categories") or []):
            logger.warning(
                "'%s' may not be compatible with %s (not listed in its categories)",
                hit.get("title"),
                loader,
            )
        return project_id

    def list_versions(self, project_id: str) -> list[dict[str, Any]]:
        """List all versions of a project in registry order.

        Raises:
            RegistryNotFoundError: If the project does not exist.
            NetworkError: On request failure or malformed response.
        """
        try:
            data = self._client.get_json(f"{self._base_url}/project/{project_id}/version")
        except NetworkError as e:
            if e.status_code == 404:
                raise RegistryNotFoundError(f"Unknown project '{project_id}'") from e
            raise

        if not isinstance(data, list):
            raise NetworkError(f"Malformed version list for '{project_id}'")
        return [v for v in data if isinstance(v, dict)]
