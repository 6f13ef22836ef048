"""Path management for modctl.

User settings live under the XDG config directory. The manifest and the
mods directory are project-local and resolved against the working
directory, so one binary can manage several instances side by side.

Defaults:
- Settings: ~/.config/modctl/config.toml
- Manifest: ./modctl.toml
- Mods: ./mods/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "modctl"

MANIFEST_FILENAME = "modctl.toml"
MODS_DIRNAME = "mods"

# Suffixes of the sibling files used while swapping the executable
BACKUP_SUFFIX = ".old"
STAGING_SUFFIX = ".new"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/modctl/ (or XDG_CONFIG_HOME/modctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_settings_path() -> Path:
    """Get the user settings file path.

    Returns:
        Path to ~/.config/modctl/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_manifest_path(base: Path | None = None) -> Path:
    """Get the default manifest file path.

    Args:
        base: Directory to resolve against. Defaults to the working directory.

    Returns:
        Path to ./modctl.toml.
    """
    return (base or Path.cwd()) / MANIFEST_FILENAME


def get_backup_path(executable: Path) -> Path:
    """Get the sibling path the running executable is moved to during a swap."""
    return executable.with_name(executable.name + BACKUP_SUFFIX)


def get_staging_path(executable: Path) -> Path:
    """Get the sibling path a new executable is downloaded to."""
    return executable.with_name(executable.name + STAGING_SUFFIX)


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_mods_dir(path: Path) -> Path:
    """Create the mods directory if it doesn't exist.

    Args:
        path: Mods directory to create.

    Returns:
        The mods directory path.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(path, "mods")
