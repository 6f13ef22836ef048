"""Data models for modctl.

This module exports the core data structures used throughout the application.
"""

from modctl.models.action import SyncAction, SyncActionType, SyncOutcome, SyncReport
from modctl.models.artifact import InstalledFile, ResolvedArtifact
from modctl.models.manifest import (
    ExternalSource,
    Manifest,
    ModEntry,
    normalize_name,
)
from modctl.models.release import PlatformAsset, ReleaseAsset, UpdateDescriptor

__all__ = [
    "ExternalSource",
    "InstalledFile",
    "Manifest",
    "ModEntry",
    "PlatformAsset",
    "ReleaseAsset",
    "ResolvedArtifact",
    "SyncAction",
    "SyncActionType",
    "SyncOutcome",
    "SyncReport",
    "UpdateDescriptor",
    "normalize_name",
]
