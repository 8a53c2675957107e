"""Unit tests for root path completion."""

import os
from pathlib import Path

import pytest
from ctxgen.tui.autocomplete import suggest_paths


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    for name in ("src", "scripts", "static", ".secret", "docs"):
        (tmp_path / name).mkdir()
    (tmp_path / "setup.cfg").write_text("")
    return tmp_path


class TestSuggestPaths:
    """Tests for suggest_paths function."""

    def test_directories_only(self, workspace: Path) -> None:
        prefix = str(workspace / "s")

        assert suggest_paths(prefix) == [
            str(workspace / "scripts") + os.sep,
            str(workspace / "src") + os.sep,
            str(workspace / "static") + os.sep,
        ]

    def test_hidden_only_when_typed(self, workspace: Path) -> None:
        hidden = str(workspace / ".secret") + os.sep

        assert suggest_paths(str(workspace) + os.sep + ".") == [hidden]
        assert hidden not in suggest_paths(str(workspace) + os.sep)

    def test_limit(self, workspace: Path) -> None:
        assert len(suggest_paths(str(workspace / "s"), limit=2)) == 2

    def test_empty_prefix(self) -> None:
        assert suggest_paths("") == []

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert suggest_paths(str(tmp_path / "missing" / "x")) == []
