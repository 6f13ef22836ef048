"""Theme management for the modctl CLI.

Colors come from the bundled ``data/theme.toml``; a user file at
``~/.config/modctl/theme.toml`` may override any subset of them.
"""

import logging
import sys
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from modctl.core.paths import get_config_dir

logger = logging.getLogger(__name__)


class ThemeColors(BaseModel):
    """Color configuration for the CLI.

    All colors must be valid hex codes (#RRGGBB or #RGB).
    """

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    keep: str = "#226666"
    install: str = "#c1ff62"
    replace: str = "#0e8ac8"
    remove: str = "#f53263"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        """Validate that all color values are valid hex codes."""
        if not isinstance(v, str):
            msg = f"{info.field_name}: color must be a string"
            raise ValueError(msg)
        color = v.strip()
        if not color.startswith("#"):
            msg = f"{info.field_name}: color must start with '#'"
            raise ValueError(msg)
        color_part = color[1:]
        if len(color_part) not in (3, 6):
            msg = f"{info.field_name}: color must be #RGB or #RRGGBB format"
            raise ValueError(msg)
        try:
            int(color_part, 16)
        except ValueError:
            msg = f"{info.field_name}: invalid hex color '{color}'"
            raise ValueError(msg) from None
        return color


def get_user_theme_path() -> Path:
    """Get the user theme override path (~/.config/modctl/theme.toml)."""
    return get_config_dir() / "theme.toml"


def get_bundled_theme_path() -> Path:
    """Get the bundled default theme path."""
    return resources.files("modctl.data").joinpath("theme.toml")  # type: ignore[return-value]


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Load the colors table from a TOML file.

    Returns:
        Color name to hex value, or None if the file is missing or unreadable.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except tomllib.TOMLDecodeError as e:
        logger.warning("Failed to parse TOML file %s: %s", path, e)
        print(f"Warning: Failed to parse {path}: {e}", file=sys.stderr)
        return None
    except OSError as e:
        logger.warning("Failed to read theme file %s: %s", path, e)
        return None

    colors_raw: object = data.get("colors", {})
    if not isinstance(colors_raw, dict):
        logger.warning("Invalid 'colors' section in %s", path)
        return None
    return {
        key: value
        for key, value in cast(dict[str, object], colors_raw).items()
        if isinstance(value, str)
    }


def load_theme() -> ThemeColors:
    """Load theme colors, user overrides on top of the bundled defaults.

    Invalid colors fall back to the built-in defaults with a warning.
    """
    bundled_colors = _load_toml_colors(Path(get_bundled_theme_path()))
    if bundled_colors is None:
        logger.error("Failed to load bundled theme - installation may be corrupted")
        bundled_colors = {}

    user_path = get_user_theme_path()
    user_colors = _load_toml_colors(user_path)
    if user_colors is not None:
        logger.debug("Loaded user theme overrides from %s", user_path)
        merged_colors = {**bundled_colors, **user_colors}
    else:
        merged_colors = bundled_colors

    try:
        return ThemeColors(**merged_colors)
    except ValidationError as e:
        logger.warning("Theme validation failed, using defaults: %s", e)
        print(f"Warning: Invalid theme configuration: {e}", file=sys.stderr)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Convert ThemeColors to a Rich Theme.

    Args:
        colors: Colors to convert. If None, loads the theme.

    Returns:
        Rich Theme with one style per color plus convenience styles.
    """
    if colors is None:
        colors = load_theme()

    styles: dict[str, str] = {
        "text": colors.text,
        "muted": colors.muted,
        "header": colors.header,
        "border": colors.border,
        "success": colors.success,
        "warning": colors.warning,
        "error": f"bold {colors.error}",
        "info": colors.info,
        "keep": colors.keep,
        "install": f"bold {colors.install}",
        "replace": colors.replace,
        "remove": colors.remove,
        "bold_header": f"bold {colors.header}",
        "dim": colors.muted,
    }
    return Theme(styles)


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Get the Rich theme, loading and caching it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
