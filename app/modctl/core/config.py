"""User settings for modctl.

Settings are stored in ~/.config/modctl/config.toml and control where the
manifest and mods directory live, which registry and release feed are
used, and the network timeout/retry policy. Command-line flags override
individual values.
"""

import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from modctl.core.paths import MANIFEST_FILENAME, MODS_DIRNAME, get_settings_path

DEFAULT_REGISTRY_URL = "https://api.modrinth.com/v2"
DEFAULT_RELEASE_REPO = "modctl/modctl"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_RETRIES = 3


class ModctlSettings(BaseModel):
    """User-level settings.

    Attributes:
        mods_dir: Mods directory, relative to the working directory unless absolute.
        manifest: Manifest file, relative to the working directory unless absolute.
        registry_url: Base URL of the Modrinth v2 API.
        release_repo: GitHub "owner/name" publishing modctl releases.
        timeout_seconds: Per-request timeout for every HTTP call.
        retries: Attempts per HTTP call before giving up.
        self_update: Whether to check for a newer executable at startup.
    """

    model_config = ConfigDict(extra="forbid")

    mods_dir: Annotated[Path, Field(description="Mods directory")] = Path(MODS_DIRNAME)
    manifest: Annotated[Path, Field(description="Manifest file")] = Path(MANIFEST_FILENAME)
    registry_url: Annotated[
        str,
        Field(description="Modrinth API base URL"),
    ] = DEFAULT_REGISTRY_URL
    release_repo: Annotated[
        str,
        Field(pattern=r"^[\w.-]+/[\w.-]+$", description="GitHub repository with releases"),
    ] = DEFAULT_RELEASE_REPO
    timeout_seconds: Annotated[
        float,
        Field(ge=1, le=600, description="HTTP timeout in seconds (1-600)"),
    ] = DEFAULT_TIMEOUT_SECONDS
    retries: Annotated[
        int,
        Field(ge=1, le=10, description="HTTP attempts per call (1-10)"),
    ] = DEFAULT_RETRIES
    self_update: Annotated[bool, Field(description="Check for updates at startup")] = True


class SettingsError(Exception):
    """Raised when the settings file cannot be read or is invalid."""


def load_settings(path: Path | None = None) -> ModctlSettings:
    """Load settings from a TOML file.

    A missing file is not an error: defaults are returned.

    Args:
        path: Path to the settings file. If None, uses the default location.

    Returns:
        Validated ModctlSettings object.

    Raises:
        SettingsError: If the file cannot be read, parsed or validated.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        return ModctlSettings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return ModctlSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {settings_path}: {e}") from e
