"""Manifest models for declarative mod configuration.

This module defines the Pydantic models representing the modctl.toml
structure that describes the desired contents of the mods directory.
Field aliases match the on-disk key names (``modLoader``, ``projectId``...).
"""

import re
from typing import Annotated, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Type alias for supported mod loaders
ModLoaderType = Literal["fabric", "forge", "neoforge"]

# Type alias for mod sources in the manifest
ModSourceType = Literal["modrinth", "curseforge", "url"]

# Type alias for remote manifest locations
ExternalSourceType = Literal["direct", "github"]

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Normalize a mod name or file stem for fuzzy file matching.

    Lowercases and replaces whitespace runs with a hyphen, so
    ``"Fabric API"`` becomes ``"fabric-api"``.
    """
    return _WHITESPACE.sub("-", name.strip().lower())


class ModEntry(BaseModel):
    """Entry for a single mod in the manifest.

    Attributes:
        name: Display name, also used for registry search and file matching.
        version: Pinned version label. If None, the latest compatible version is used.
        source: Where the mod comes from ("modrinth", "curseforge" or "url").
        project_id: Explicit registry identifier; skips search when set.
        download_url: Direct download URL (required for "url" entries).
        file_name: Target file name for "url" entries.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    name: Annotated[str, Field(min_length=1, description="Mod name")]
    version: Annotated[str | None, Field(description="Pinned version label")] = None
    source: Annotated[ModSourceType, Field(description="Mod source")] = "modrinth"
    project_id: Annotated[
        str | None,
        Field(alias="projectId", description="Registry project identifier"),
    ] = None
    download_url: Annotated[
        str | None,
        Field(alias="downloadUrl", description="Direct download URL"),
    ] = None
    file_name: Annotated[
        str | None,
        Field(alias="fileName", description="Target file name"),
    ] = None

    @model_validator(mode="after")
    def validate_entry(self) -> Self:
        """Validate that url entries carry a URL and file names are bare names."""
        if self.source == "url" and not self.download_url:
            msg = f"Mod '{self.name}' has source 'url' but no downloadUrl"
            raise ValueError(msg)
        if self.file_name and ("/" in self.file_name or "\\" in self.file_name):
            msg = f"Mod '{self.name}' has a fileName with a path: {self.file_name}"
            raise ValueError(msg)
        return self

    @property
    def base_name(self) -> str:
        """Normalized name used to recognize this mod's files."""
        return normalize_name(self.name)


class ExternalSource(BaseModel):
    """Pointer to a remote manifest overlaid on the local one.

    Attributes:
        type: "direct" for a plain URL, "github" for a file in a repository.
        url: Manifest URL (direct).
        repo: Repository as "owner/name" (github).
        branch: Branch to read from (github).
        file: Path of the manifest inside the repository (github).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Annotated[ExternalSourceType, Field(description="Remote manifest kind")]
    url: Annotated[str | None, Field(description="Manifest URL")] = None
    repo: Annotated[str | None, Field(description="GitHub repository")] = None
    branch: Annotated[str, Field(description="GitHub branch")] = "main"
    file: Annotated[str, Field(description="Manifest path in repository")] = "modctl.toml"

    @model_validator(mode="after")
    def validate_location(self) -> Self:
        """Validate that the fields required by the source type are set."""
        if self.type == "direct" and not self.url:
            raise ValueError("externalSource of type 'direct' requires 'url'")
        if self.type == "github" and not self.repo:
            raise ValueError("externalSource of type 'github' requires 'repo'")
        return self

    @property
    def resolved_url(self) -> str:
        """URL the remote manifest is fetched from."""
        if self.type == "github":
            return f"https://raw.githubusercontent.com/{self.repo}/{self.branch}/{self.file}"
        return self.url or ""


class Manifest(BaseModel):
    """Complete manifest representing the desired mods directory.

    The loader and game version are used as compatibility filters for
    every resolution in a sync pass; the model is frozen so they cannot
    change mid-pass.

    Attributes:
        mod_loader: Target mod loader.
        game_version: Target game version (e.g., "1.20.1").
        prune: Delete files that match no manifest entry.
        mods: Ordered list of desired mods.
        external_source: Optional remote manifest to overlay.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    mod_loader: Annotated[ModLoaderType, Field(alias="modLoader", description="Mod loader")]
    game_version: Annotated[
        str,
        Field(alias="gameVersion", min_length=1, description="Game version"),
    ]
    prune: Annotated[bool, Field(description="Delete unrecognized mod files")] = True
    mods: Annotated[
        tuple[ModEntry, ...],
        Field(default_factory=tuple, description="Desired mods in order"),
    ]
    external_source: Annotated[
        ExternalSource | None,
        Field(alias="externalSource", description="Remote manifest overlay"),
    ] = None

    @property
    def base_names(self) -> list[str]:
        """Normalized names of all entries, in manifest order."""
        return [entry.base_name for entry in self.mods]

    @property
    def mod_count(self) -> int:
        """Total number of mods tracked in the manifest."""
        return len(self.mods)
