"""Color theme for ctxgen.

The palette is read from the bundled ``ctxgen/data/theme.toml`` and may be
partially overridden by ``~/.config/ctxgen/theme.toml``. Every screen and
console draws with the named Rich styles built from it (``directory``,
``cursor``, ``tab.active`` ...), never with literal colors.
"""

import logging
import re
import tomllib
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from ctxgen.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")


class ThemeColors(BaseModel):
    """Palette of hex colors (#RGB or #RRGGBB)."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    directory: str = "#0e8ac8"
    file: str = "#dfe6e9"
    hidden: str = "#636e72"

    cursor: str = "#faf870"
    selected: str = "#c1ff62"
    progress: str = "#69B9A1"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex(cls, value: object) -> str:
        """Accept only #RGB and #RRGGBB strings."""
        if not isinstance(value, str) or not _HEX_COLOR.fullmatch(value.strip()):
            msg = f"expected a #RGB or #RRGGBB color, got {value!r}"
            raise ValueError(msg)
        return value.strip()


# Rich style name -> (palette color, style attributes)
STYLES: dict[str, tuple[str, str]] = {
    "text": ("text", ""),
    "muted": ("muted", ""),
    "dim": ("muted", ""),
    "header": ("header", ""),
    "bold_header": ("header", "bold"),
    "border": ("border", ""),
    "success": ("success", ""),
    "warning": ("warning", ""),
    "error": ("error", "bold"),
    "info": ("info", ""),
    "directory": ("directory", "bold"),
    "file": ("file", ""),
    "hidden": ("hidden", ""),
    "cursor": ("cursor", "reverse"),
    "selected": ("selected", "bold"),
    "progress": ("progress", ""),
    "tab.active": ("header", "bold reverse"),
    "tab.inactive": ("muted", ""),
}


def get_bundled_theme_path() -> Path:
    """Path of the theme shipped with the package."""
    return Path(str(resources.files("ctxgen.data").joinpath("theme.toml")))


def read_colors(path: Path) -> dict[str, str]:
    """Read the ``[colors]`` table of a theme file.

    Missing files yield no colors. Unreadable or malformed files are logged
    and also yield no colors; non-string values are dropped.

    Args:
        path: Theme file to read.

    Returns:
        Mapping of palette names to color strings.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return {}
    return {name: value for name, value in colors.items() if isinstance(value, str)}


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Build the palette from the bundled theme and the user overrides.

    An override that fails validation discards all overrides rather than
    mixing valid and invalid entries.

    Args:
        user_path: Override file. If None, uses ~/.config/ctxgen/theme.toml.

    Returns:
        Validated palette.
    """
    bundled = read_colors(get_bundled_theme_path())
    if not bundled:
        logger.error("Bundled theme is missing or empty; using built-in colors")

    overrides = read_colors(user_path or get_user_theme_path())
    try:
        return ThemeColors(**{**bundled, **overrides})
    except ValidationError as e:
        logger.warning("Invalid theme overrides, using the bundled theme: %s", e)

    try:
        return ThemeColors(**bundled)
    except ValidationError:
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Convert a palette into the Rich theme used by all consoles.

    Args:
        colors: Palette to convert. If None, it is loaded with load_theme.
    """
    palette = colors or load_theme()
    styles = {}
    for name, (color_name, attributes) in STYLES.items():
        color = getattr(palette, color_name)
        styles[name] = f"{attributes} {color}".strip()
    return Theme(styles)


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Rich theme, loaded on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme


def reload_theme() -> Theme:
    """Reload the theme from disk, replacing the cached one."""
    global _cached_theme
    _cached_theme = get_rich_theme()
    return _cached_theme
