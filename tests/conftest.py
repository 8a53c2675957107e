"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Small tree: a.txt (10 B), .hidden (5 B) and sub/b.go (20 B)."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "a.txt").write_bytes(b"x" * 10)
    (root / ".hidden").write_bytes(b"h" * 5)
    (root / "sub").mkdir()
    (root / "sub" / "b.go").write_bytes(b"g" * 20)
    return root


@pytest.fixture
def nested_tree(tmp_path: Path) -> Path:
    """Deeper tree with excluded directories, binary content and mixed sizes."""
    root = tmp_path / "repo"
    root.mkdir()
    (root / "README.md").write_text("# readme\n")
    (root / "main.py").write_text("print('hi')\n")
    (root / "debug.log").write_text("log line\n")
    (root / "image.bin").write_bytes(b"\x89PNG\x00\x01\x02\x03" * 16)
    (root / "big.txt").write_bytes(b"b" * 4096)

    (root / "src").mkdir()
    (root / "src" / "app.py").write_text("import os\n")
    (root / "src" / "util.go").write_text("package util\n")
    (root / "src" / "deep").mkdir()
    (root / "src" / "deep" / "inner.py").write_text("x = 1\n")

    (root / "node_modules").mkdir()
    (root / "node_modules" / "lib.js").write_text("module.exports = {}\n")

    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    return root


@pytest.fixture
def xdg_home(tmp_path: Path) -> Iterator[Path]:
    """Point XDG config and state directories into a temporary directory."""
    env = {
        "XDG_CONFIG_HOME": str(tmp_path / "config"),
        "XDG_STATE_HOME": str(tmp_path / "state"),
    }
    with patch.dict(os.environ, env):
        yield tmp_path
