"""Structural check for downloaded mod archives.

Only the zip local-file-header signature is checked; a correctly signed
but corrupt archive passes. The validator never modifies the file, the
caller decides whether to delete it.
"""

from pathlib import Path

from modctl.core.errors import InvalidArtifactError

# Zip local file header: "PK\x03\x04"
ZIP_SIGNATURE = b"PK\x03\x04"


def validate_artifact(path: Path) -> None:
    """Check that ``path`` is a non-empty zip archive.

    Args:
        path: File to check.

    Raises:
        InvalidArtifactError: If the file is missing, empty or not a zip archive.
    """
    try:
        with open(path, "rb") as f:
            header = f.read(len(ZIP_SIGNATURE))
    except OSError as e:
        raise InvalidArtifactError(f"Cannot read {path.name}: {e}") from e

    if not header:
        raise InvalidArtifactError(f"{path.name} is empty")
    if header != ZIP_SIGNATURE:
        raise InvalidArtifactError(f"{path.name} is not a valid jar/zip archive")
