"""Unit tests for theme module.

Tests for palette validation, theme file loading and Rich theme generation.
"""

# pyright: reportPrivateUsage=false

import logging
from pathlib import Path

import ctxgen.core.theme as theme_module
import pytest
from ctxgen.core.theme import (
    STYLES,
    ThemeColors,
    get_bundled_theme_path,
    get_rich_theme,
    get_theme,
    load_theme,
    read_colors,
    reload_theme,
)
from pydantic import ValidationError
from rich.theme import Theme


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_default_values(self) -> None:
        """ThemeColors has sensible defaults."""
        colors = ThemeColors()
        assert colors.text == "#ffffff"
        assert colors.header == "#69B9A1"
        assert colors.directory == "#0e8ac8"

    def test_short_hex(self) -> None:
        """ThemeColors accepts #RGB colors."""
        assert ThemeColors(cursor=" #abc ").cursor == "#abc"

    @pytest.mark.parametrize("value", ["ffffff", "#ff", "#fffffff", "#gggggg", 3])
    def test_invalid_colors(self, value: object) -> None:
        with pytest.raises(ValidationError, match="expected a #RGB or #RRGGBB color"):
            ThemeColors(selected=value)  # type: ignore[arg-type]

    def test_extra_fields_forbidden(self) -> None:
        """ThemeColors rejects unknown fields."""
        with pytest.raises(ValidationError):
            ThemeColors(package_manual="#ffffff")  # type: ignore[call-arg]


class TestReadColors:
    """Tests for read_colors function."""

    def test_reads_colors_table(self, tmp_path: Path) -> None:
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\ndirectory = "#000000"\ntext = 3\n')

        assert read_colors(theme_file) == {"directory": "#000000"}

    def test_missing_file(self, tmp_path: Path) -> None:
        assert read_colors(tmp_path / "nonexistent.toml") == {}

    def test_invalid_toml(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.WARNING, logger="ctxgen.core.theme")
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text("not valid [ toml syntax")

        assert read_colors(theme_file) == {}
        assert "Ignoring theme file" in caplog.text

    def test_colors_not_a_table(self, tmp_path: Path) -> None:
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('colors = "red"\n')

        assert read_colors(theme_file) == {}


class TestLoadTheme:
    """Tests for load_theme function."""

    def test_bundled_theme_exists(self) -> None:
        """The bundled theme ships with the package."""
        assert get_bundled_theme_path().is_file()

    def test_bundled_matches_defaults(self, tmp_path: Path) -> None:
        assert load_theme(tmp_path / "missing.toml") == ThemeColors()

    def test_user_overrides(self, tmp_path: Path) -> None:
        """User colors replace bundled ones, the rest stays."""
        user_theme = tmp_path / "theme.toml"
        user_theme.write_text('[colors]\ncursor = "#ff0000"\n')

        colors = load_theme(user_theme)

        assert colors.cursor == "#ff0000"
        assert colors.text == "#ffffff"

    def test_invalid_overrides_are_dropped(self, tmp_path: Path) -> None:
        user_theme = tmp_path / "theme.toml"
        user_theme.write_text('[colors]\ncursor = "#ff0000"\nheader = "red"\n')

        colors = load_theme(user_theme)

        assert colors == ThemeColors()


class TestGetRichTheme:
    """Tests for get_rich_theme function."""

    def test_defines_every_style(self) -> None:
        theme = get_rich_theme(ThemeColors())

        for name in STYLES:
            assert name in theme.styles

    def test_attributes_applied(self) -> None:
        theme = get_rich_theme(ThemeColors(cursor="#123456"))

        assert theme.styles["cursor"].reverse
        assert theme.styles["tab.active"].bold


class TestThemeCache:
    """Tests for get_theme and reload_theme."""

    def test_get_theme_is_cached(self) -> None:
        first = get_theme()
        assert get_theme() is first
        assert isinstance(first, Theme)

    def test_reload_replaces_cache(self) -> None:
        first = get_theme()
        reloaded = reload_theme()

        assert reloaded is not first
        assert theme_module._cached_theme is reloaded
