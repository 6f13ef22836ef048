"""Release asset selection for the running platform."""

import platform as _platform

from modctl.core.errors import UnsupportedPlatformError
from modctl.models.release import PlatformAsset, UpdateDescriptor

_SYSTEMS = {
    "windows": "windows",
    "linux": "linux",
    "darwin": "macos",
}

_MACHINES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "arm64": "arm64",
    "aarch64": "arm64",
}

# (os, arch) -> asset name template
ASSET_NAMES: dict[tuple[str, str], str] = {
    ("windows", "x64"): "{app}-windows-x64.exe",
    ("linux", "x64"): "{app}-linux-x64",
    ("linux", "arm64"): "{app}-linux-arm64",
    ("macos", "x64"): "{app}-macos-x64",
    ("macos", "arm64"): "{app}-macos-arm64",
}


def normalize_platform(system: str | None = None, machine: str | None = None) -> tuple[str, str]:
    """Normalize OS and architecture names.

    Args:
        system: Value like ``platform.system()``. Detected if None.
        machine: Value like ``platform.machine()``. Detected if None.

    Returns:
        Tuple of (os, arch), e.g. ("linux", "x64").

    Raises:
        UnsupportedPlatformError: If the OS or architecture is unknown.
    """
    raw_system = (system if system is not None else _platform.system()).lower()
    raw_machine = (machine if machine is not None else _platform.machine()).lower()

    os_name = _SYSTEMS.get(raw_system)
    arch = _MACHINES.get(raw_machine)
    if os_name is None or arch is None:
        raise UnsupportedPlatformError(f"Unsupported platform: {raw_system}/{raw_machine}")
    return os_name, arch


def asset_name_for(app_name: str, os_name: str, arch: str) -> str:
    """Get the release asset name for a platform.

    Raises:
        UnsupportedPlatformError: If no asset is published for the pair.
    """
    template = ASSET_NAMES.get((os_name, arch))
    if template is None:
        raise UnsupportedPlatformError(f"No release build for {os_name}/{arch}")
    return template.format(app=app_name)


def select_asset(
    descriptor: UpdateDescriptor,
    app_name: str,
    os_name: str,
    arch: str,
) -> PlatformAsset:
    """Pick the asset of a release matching the platform.

    Args:
        descriptor: Release to pick from.
        app_name: Application name used in asset names.
        os_name: Normalized OS.
        arch: Normalized architecture.

    Returns:
        The selected asset.

    Raises:
        UnsupportedPlatformError: If the platform has no asset name or the
            release does not carry it.
    """
    name = asset_name_for(app_name, os_name, arch)
    asset = descriptor.find_asset(name)
    if asset is None:
        raise UnsupportedPlatformError(f"Release {descriptor.tag} has no asset {name}")
    return PlatformAsset(asset=asset, os_name=os_name, arch=arch)
