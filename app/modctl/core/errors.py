"""Error kinds shared by the resolver, reconciliation engine and updater.

Every failure that can be reported for a manifest entry or for a
self-update run is a subclass of :class:`ModctlError` and carries an
:class:`ErrorKind`, so callers can report the kind without matching on
exception classes.
"""

from enum import Enum
from pathlib import Path


class ErrorKind(str, Enum):
    """Classification of a reported failure.

    Attributes:
        REGISTRY_NOT_FOUND: No search hits, or unknown project identifier.
        VERSION_INCOMPATIBLE: No version matches loader and game version,
            or a pinned version does not exist.
        UNSUPPORTED_SOURCE: The entry's source is not implemented.
        INVALID_ARTIFACT: Downloaded file is empty or not a zip archive.
        NETWORK_FAILURE: Transport error, non-success status or malformed body.
        FILESYSTEM_FAILURE: Permission, missing path or rename failure.
        UNSUPPORTED_PLATFORM: No release asset for this OS/architecture.
        ROLLBACK_FAILED: Executable swap failed and could not be undone.
    """

    REGISTRY_NOT_FOUND = "RegistryNotFound"
    VERSION_INCOMPATIBLE = "VersionIncompatible"
    UNSUPPORTED_SOURCE = "UnsupportedSource"
    INVALID_ARTIFACT = "InvalidArtifact"
    NETWORK_FAILURE = "NetworkFailure"
    FILESYSTEM_FAILURE = "FilesystemFailure"
    UNSUPPORTED_PLATFORM = "UnsupportedPlatform"
    ROLLBACK_FAILED = "RollbackFailed"


class ModctlError(Exception):
    """Base exception for reportable modctl failures."""

    kind: ErrorKind = ErrorKind.FILESYSTEM_FAILURE


class RegistryNotFoundError(ModctlError):
    """Raised when the registry has no project for a query or identifier."""

    kind = ErrorKind.REGISTRY_NOT_FOUND


class VersionIncompatibleError(ModctlError):
    """Raised when no version satisfies the compatibility filters."""

    kind = ErrorKind.VERSION_INCOMPATIBLE


class UnsupportedSourceError(ModctlError):
    """Raised for manifest sources that have no resolver."""

    kind = ErrorKind.UNSUPPORTED_SOURCE


class InvalidArtifactError(ModctlError):
    """Raised when a downloaded file is not a well-formed archive."""

    kind = ErrorKind.INVALID_ARTIFACT


class NetworkError(ModctlError):
    """Raised for transport failures, HTTP errors and malformed responses.

    Attributes:
        status_code: HTTP status of the failed response, if any.
        transient: Whether retrying the request may succeed.
    """

    kind = ErrorKind.NETWORK_FAILURE

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.transient = transient


class FilesystemError(ModctlError):
    """Raised when a filesystem operation fails."""

    kind = ErrorKind.FILESYSTEM_FAILURE


class UnsupportedPlatformError(ModctlError):
    """Raised when no release asset exists for the running platform."""

    kind = ErrorKind.UNSUPPORTED_PLATFORM


class RollbackFailedError(ModctlError):
    """Raised when an executable swap fails and the backup cannot be restored.

    The installation is left without an executable at ``executable`` and
    with the previous binary at ``backup``.

    Attributes:
        executable: Path where the executable should be.
        backup: Path holding the previous executable.
    """

    kind = ErrorKind.ROLLBACK_FAILED

    def __init__(self, executable: Path, backup: Path, cause: OSError) -> None:
        super().__init__(
            f"Executable swap failed and restore failed: {executable} is missing, "
            f"previous binary left at {backup} ({cause})"
        )
        self.executable = executable
        self.backup = backup
