"""Build-mode flag.

The release packaging step rewrites ``BUILD_MODE`` to ``"release"`` before
compiling the standalone executable. Source checkouts and editable installs
keep ``"dev"``, which disables self-update.
"""

import os
from typing import Literal

BuildMode = Literal["dev", "release"]

BUILD_MODE: BuildMode = "dev"


def get_build_mode() -> BuildMode:
    """Return the effective build mode.

    ``MODCTL_BUILD_MODE`` overrides the stamped value so a packaged binary
    can be forced into dev mode (and vice versa) for troubleshooting.
    """
    override = os.environ.get("MODCTL_BUILD_MODE", "").strip().lower()
    if override in ("dev", "release"):
        return override  # type: ignore[return-value]
    return BUILD_MODE
