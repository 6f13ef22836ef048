"""Release feed models used by the self-updater."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ReleaseAsset:
    """Downloadable file attached to a release.

    Attributes:
        name: Asset file name (e.g., "modctl-linux-x64").
        url: Download URL.
        size_bytes: Declared size in bytes.
    """

    name: str
    url: str
    size_bytes: int


@dataclass(frozen=True, slots=True)
class UpdateDescriptor:
    """Latest release as reported by the release feed.

    Attributes:
        tag: Release tag (e.g., "v1.4.0").
        assets: Assets attached to the release.
    """

    tag: str
    assets: tuple[ReleaseAsset, ...]

    def find_asset(self, name: str) -> ReleaseAsset | None:
        """Find an asset by exact name."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None


@dataclass(frozen=True, slots=True)
class PlatformAsset:
    """Release asset selected for the running OS/architecture pair.

    Attributes:
        asset: The selected asset.
        os_name: Normalized OS ("windows", "linux" or "macos").
        arch: Normalized architecture ("x64" or "arm64").
    """

    asset: ReleaseAsset
    os_name: str
    arch: str

    @property
    def is_windows(self) -> bool:
        """Check if the asset targets Windows."""
        return self.os_name == "windows"
