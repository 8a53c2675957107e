"""Unit tests for config CLI commands.

Tests for the ctxgen config show, init and path commands.
"""

import tomllib
from pathlib import Path

from ctxgen.cli.main import app
from ctxgen.core.config import DEFAULT_EXCLUDE_PATTERNS
from typer.testing import CliRunner

runner = CliRunner()


def _settings_path(xdg_home: Path) -> Path:
    return xdg_home / "config" / "ctxgen" / "settings.toml"


class TestConfigShow:
    """Tests for ctxgen config show command."""

    def test_defaults_when_missing(self, xdg_home: Path) -> None:
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "No settings file" in result.stdout
        assert 'sort_by = "name"' in result.stdout

    def test_existing_file(self, xdg_home: Path) -> None:
        path = _settings_path(xdg_home)
        path.parent.mkdir(parents=True)
        path.write_text("max_depth = 3\n")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "max_depth = 3" in result.stdout

    def test_invalid_file(self, xdg_home: Path) -> None:
        path = _settings_path(xdg_home)
        path.parent.mkdir(parents=True)
        path.write_text("max_depth = -2\n")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 1


class TestConfigInit:
    """Tests for ctxgen config init command."""

    def test_creates_file(self, xdg_home: Path) -> None:
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0
        data = tomllib.loads(_settings_path(xdg_home).read_text())
        assert data["exclude_patterns"] == list(DEFAULT_EXCLUDE_PATTERNS)

    def test_refuses_to_overwrite(self, xdg_home: Path) -> None:
        path = _settings_path(xdg_home)
        path.parent.mkdir(parents=True)
        path.write_text("max_depth = 3\n")

        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 1
        assert path.read_text() == "max_depth = 3\n"

    def test_force(self, xdg_home: Path) -> None:
        path = _settings_path(xdg_home)
        path.parent.mkdir(parents=True)
        path.write_text("max_depth = 3\n")

        result = runner.invoke(app, ["config", "init", "--force"])

        assert result.exit_code == 0
        assert tomllib.loads(path.read_text())["max_depth"] == 0


class TestConfigPath:
    """Tests for ctxgen config path command."""

    def test_prints_path(self, xdg_home: Path) -> None:
        result = runner.invoke(app, ["config", "path"])

        assert result.exit_code == 0
        assert result.stdout.strip() == str(_settings_path(xdg_home))
