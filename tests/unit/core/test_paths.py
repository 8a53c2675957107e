"""Unit tests for XDG path management.

Tests for the paths module that provides XDG-compliant directory paths.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from ctxgen.core.paths import (
    APP_NAME,
    ensure_state_dir,
    get_config_dir,
    get_log_path,
    get_settings_path,
    get_state_dir,
    get_user_theme_path,
)


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            os.environ.pop("XDG_CONFIG_HOME", None)

            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME


class TestGetStateDir:
    """Tests for get_state_dir function."""

    def test_default_state_dir(self) -> None:
        """get_state_dir returns default path when XDG_STATE_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            os.environ.pop("XDG_STATE_HOME", None)

            result = get_state_dir()

        assert result == Path.home() / ".local" / "state" / APP_NAME

    def test_respects_xdg_state_home(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"XDG_STATE_HOME": str(tmp_path)}):
            result = get_state_dir()

        assert result == tmp_path / APP_NAME


class TestFilePaths:
    """Tests for file path helpers."""

    def test_settings_path(self, xdg_home: Path) -> None:
        assert get_settings_path() == xdg_home / "config" / APP_NAME / "settings.toml"

    def test_user_theme_path(self, xdg_home: Path) -> None:
        assert get_user_theme_path() == xdg_home / "config" / APP_NAME / "theme.toml"

    def test_log_path(self, xdg_home: Path) -> None:
        assert get_log_path() == xdg_home / "state" / APP_NAME / "ctxgen.log"


class TestEnsureDirs:
    """Tests for directory creation."""

    def test_creates_directories(self, xdg_home: Path) -> None:
        """ensure_state_dir creates the missing directory."""
        assert ensure_state_dir() == xdg_home / "state" / APP_NAME
        assert (xdg_home / "state" / APP_NAME).is_dir()

    def test_error_on_unwritable_location(self, tmp_path: Path) -> None:
        """A file in the way is reported as RuntimeError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with (
            patch.dict(os.environ, {"XDG_STATE_HOME": str(blocker)}),
            pytest.raises(RuntimeError, match="Cannot create state directory"),
        ):
            ensure_state_dir()
