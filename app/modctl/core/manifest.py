"""Manifest file I/O operations.

This module provides functions for loading and saving manifest files
in TOML format with proper validation using Pydantic models, creating
the example manifest, and overlaying a remote manifest.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import TYPE_CHECKING, Any

import tomli_w
from pydantic import ValidationError

from modctl.core.errors import ModctlError
from modctl.core.paths import get_manifest_path
from modctl.models.manifest import Manifest, ModEntry

if TYPE_CHECKING:
    from modctl.core.http import HttpClient

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Base exception for manifest-related errors."""


class ManifestNotFoundError(ManifestError):
    """Raised when manifest file is not found."""


class ManifestParseError(ManifestError):
    """Raised when manifest file cannot be parsed."""


class ManifestValidationError(ManifestError):
    """Raised when manifest content is invalid."""


class RemoteManifestError(ManifestError):
    """Raised when the external manifest cannot be fetched or merged."""


def parse_manifest(data: dict[str, Any]) -> Manifest:
    """Validate raw manifest data.

    Raises:
        ManifestValidationError: If the content doesn't match the schema.
    """
    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestValidationError(f"Invalid manifest content: {e}") from e


def _read_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file into a dictionary."""
    if not path.exists():
        raise ManifestNotFoundError(f"Manifest not found: {path}")

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ManifestParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ManifestError(f"Failed to read manifest: {e}") from e


def load_manifest(path: Path | None = None) -> Manifest:
    """Load and validate a manifest from a TOML file.

    Args:
        path: Path to the manifest file. If None, uses default manifest path.

    Returns:
        Validated Manifest object.

    Raises:
        ManifestNotFoundError: If the manifest file doesn't exist.
        ManifestParseError: If the TOML syntax is invalid.
        ManifestValidationError: If the content doesn't match the schema.
    """
    return parse_manifest(_read_toml(path or get_manifest_path()))


def save_manifest(manifest: Manifest, path: Path | None = None) -> Path:
    """Save a manifest to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.
    The temporary file is cleaned up on failure.

    Args:
        manifest: The Manifest object to save.
        path: Path to save the manifest. If None, uses default manifest path.

    Returns:
        Path where the manifest was saved.

    Raises:
        ManifestError: If the file cannot be written.
    """
    manifest_path = path or get_manifest_path()
    data = manifest_to_dict(manifest)

    tmp_path: Path | None = None
    try:
        manifest_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=manifest_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(tmp_path, manifest_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ManifestError(f"Failed to write manifest: {e}") from e

    return manifest_path


def manifest_exists(path: Path | None = None) -> bool:
    """Check if a manifest file exists.

    Args:
        path: Path to check. If None, uses default manifest path.

    Returns:
        True if the manifest file exists, False otherwise.
    """
    manifest_path = path or get_manifest_path()
    return manifest_path.exists()


def create_example_manifest() -> Manifest:
    """Build the example manifest written on first run.

    Shows each way of declaring a mod: by registry id, pinned to a
    version, by name only, and from a direct URL.
    """
    return Manifest(
        mod_loader="fabric",
        game_version="1.20.1",
        mods=(
            ModEntry(name="Fabric API", source="modrinth", project_id="P7dR8mSH"),
            ModEntry(name="JEI", version="15.2.0.27", source="modrinth", project_id="u6dRKJwZ"),
            ModEntry(name="Sodium", source="modrinth"),
            ModEntry(
                name="Custom Mod",
                version="1.0.0",
                source="url",
                download_url="https://example.com/mod.jar",
                file_name="custom-mod-1.0.0.jar",
            ),
        ),
    )


def fetch_remote_manifest(manifest: Manifest, client: HttpClient) -> Manifest:
    """Overlay the manifest's external source, if any.

    The remote document's top-level keys replace the local ones; the
    local ``externalSource`` is kept so the overlay is not chained.
    Callers fall back to the local manifest on failure.

    Args:
        manifest: Local manifest.
        client: HTTP client for the fetch.

    Returns:
        The merged manifest, or ``manifest`` if there is no external source.

    Raises:
        RemoteManifestError: If the remote manifest cannot be fetched,
            parsed or merged.
    """
    source = manifest.external_source
    if source is None:
        return manifest

    url = source.resolved_url
    try:
        remote = tomllib.loads(client.get_text(url))
        merged = {**manifest_to_dict(manifest), **remote}
        merged["externalSource"] = source.model_dump(exclude_none=True)
        result = parse_manifest(merged)
    except (ModctlError, tomllib.TOMLDecodeError, ManifestError) as e:
        raise RemoteManifestError(f"Remote manifest {url} ignored: {e}") from e

    logger.info("Applied remote manifest from %s", url)
    return result


def manifest_to_dict(manifest: Manifest) -> dict[str, Any]:
    """Convert a Manifest to a dictionary suitable for TOML serialization.

    Uses the on-disk key names and drops unset optional fields.

    Args:
        manifest: The Manifest object to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return manifest.model_dump(mode="json", by_alias=True, exclude_none=True)
