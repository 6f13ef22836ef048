"""Resolved artifacts and installed mod files.

These are the two sides the reconciliation engine compares: what the
registry says should be installed for an entry, and what is on disk.
"""

from dataclasses import dataclass

from modctl.models.manifest import normalize_name

JAR_SUFFIX = ".jar"


@dataclass(frozen=True, slots=True)
class ResolvedArtifact:
    """Concrete downloadable file resolved for one manifest entry.

    Attributes:
        source_url: URL the file is downloaded from.
        version_label: Version string reported by the source.
        target_file_name: File name the artifact is installed under.
    """

    source_url: str
    version_label: str
    target_file_name: str

    def __post_init__(self) -> None:
        """Validate artifact data after initialization."""
        if not self.target_file_name:
            msg = "Target file name cannot be empty"
            raise ValueError(msg)
        if "/" in self.target_file_name or "\\" in self.target_file_name:
            msg = f"Target file name must not contain a path: {self.target_file_name}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class InstalledFile:
    """Mod archive observed in the mods directory when a pass starts.

    Attributes:
        name: File name (e.g., "sodium-fabric-0.5.7.jar").
        size_bytes: File size at listing time.
    """

    name: str
    size_bytes: int

    @property
    def base_name(self) -> str:
        """Normalized file stem used to match manifest entries."""
        stem = self.name
        if stem.lower().endswith(JAR_SUFFIX):
            stem = stem[: -len(JAR_SUFFIX)]
        return normalize_name(stem)
