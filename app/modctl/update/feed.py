"""GitHub release feed client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from packaging.version import InvalidVersion, Version

from modctl.core.errors import ModctlError, NetworkError
from modctl.models.release import ReleaseAsset, UpdateDescriptor

if TYPE_CHECKING:
    from modctl.core.http import HttpClient

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


def parse_version(tag: str) -> Version:
    """Parse a release tag, ignoring a leading 'v'.

    Raises:
        InvalidVersion: If the tag is not a version.
    """
    tag = tag.strip()
    return Version(tag[1:] if tag[:1] in ("v", "V") else tag)


def is_newer(remote_tag: str, current_version: str) -> bool:
    """Check whether a release tag is strictly newer than the running version.

    Raises:
        NetworkError: If the remote tag is not a version (malformed release).
        ModctlError: If the running version is not a version.
    """
    try:
        remote = parse_version(remote_tag)
    except InvalidVersion as e:
        raise NetworkError(
            f"Malformed release response: tag '{remote_tag}' is not a version"
        ) from e
    try:
        current = parse_version(current_version)
    except InvalidVersion as e:
        raise ModctlError(f"Running version '{current_version}' is not a version") from e
    return remote > current


def _parse_asset(raw: Any) -> ReleaseAsset | None:
    if not isinstance(raw, dict):
        return None
    name = raw.get("name")
    url = raw.get("browser_download_url")
    if not isinstance(name, str) or not isinstance(url, str):
        return None
    size = raw.get("size")
    return ReleaseAsset(name=name, url=url, size_bytes=size if isinstance(size, int) else 0)


def parse_release(data: Any) -> UpdateDescriptor:
    """Build an UpdateDescriptor from a ``releases/latest`` response.

    Assets without a name or download URL are skipped.

    Raises:
        NetworkError: If the response has no tag.
    """
    if not isinstance(data, dict) or not isinstance(data.get("tag_name"), str):
        raise NetworkError("Malformed release response: missing tag_name")

    assets = tuple(
        asset for asset in map(_parse_asset, data.get("assets") or []) if asset is not None
    )
    return UpdateDescriptor(tag=data["tag_name"], assets=assets)


def fetch_latest_release(
    client: HttpClient,
    repo: str,
    api_url: str = GITHUB_API_URL,
) -> UpdateDescriptor:
    """Fetch the latest published release of a repository.

    Args:
        client: HTTP client.
        repo: Repository as "owner/name".
        api_url: GitHub API base URL.

    Returns:
        Descriptor of the latest release.

    Raises:
        NetworkError: On request failure or malformed response.
    """
    data = client.get_json(f"{api_url.rstrip('/')}/repos/{repo}/releases/latest")
    descriptor = parse_release(data)
    logger.debug("Latest release of %s is %s", repo, descriptor.tag)
    return descriptor
