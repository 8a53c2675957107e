"""Unit tests for the session runtime.

The terminal loop itself needs a TTY; these tests drive command execution
and rendering directly.
"""

import os
from pathlib import Path

import pytest
from ctxgen.core.config import load_settings
from ctxgen.core.theme import get_theme
from ctxgen.filesystem.errors import RootUnreadableError
from ctxgen.filesystem.models import ScanOptions, ScanResult
from ctxgen.scan.coordinator import run_scan
from ctxgen.tui.app import SessionApp, render_session
from ctxgen.tui.session import Command, SessionState, SuggestionsUpdated
from ctxgen.tui.views.report import ReportView
from rich.console import Console


def _render_text(app: SessionApp) -> str:
    console = Console(width=120, record=True, color_system=None, theme=get_theme())
    console.print(render_session(app.session))
    return console.export_text()


@pytest.fixture
def app(sample_tree: Path, tmp_path: Path) -> SessionApp:
    session_app = SessionApp(
        root_path=str(sample_tree),
        options=ScanOptions(max_depth=2),
        settings_path=tmp_path / "settings.toml",
    )
    session_app.session.start()
    return session_app


def _complete(app: SessionApp, result: ScanResult) -> None:
    app.session.last_result = result
    app.session.report = ReportView(result)
    app.session.state = SessionState.RESULT


class TestExecute:
    """Tests for SessionApp.execute."""

    def test_quit(self, app: SessionApp) -> None:
        assert not app.execute(Command.QUIT)

    def test_none(self, app: SessionApp) -> None:
        assert app.execute(Command.NONE)

    def test_save_settings(self, app: SessionApp, tmp_path: Path) -> None:
        app.session.options = app.session.options.with_changes(selected_paths=("/a",))

        assert app.execute(Command.SAVE_SETTINGS)

        settings = load_settings(tmp_path / "settings.toml")
        assert settings.max_depth == 2
        assert "Settings saved" in app.session.status

    def test_save_settings_failure(self, app: SessionApp, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        app.settings_path = blocker / "settings.toml"

        app.execute(Command.SAVE_SETTINGS)

        assert "Could not save settings" in app.session.status

    def test_export_result(self, app: SessionApp, sample_tree: Path) -> None:
        _complete(app, run_scan(sample_tree, ScanOptions()))

        app.execute(Command.EXPORT_RESULT)

        exported = list(sample_tree.glob("ctxgen-manifest-*.json"))
        assert len(exported) == 1
        assert app.session.report is not None
        assert "Manifest written" in app.session.report.status

    def test_suggest_paths(self, app: SessionApp, sample_tree: Path) -> None:
        app.session.root_path_input = str(sample_tree / "s")

        app.execute(Command.SUGGEST_PATHS)
        message = app.queue.get(timeout=5.0)

        assert isinstance(message, SuggestionsUpdated)
        assert message.suggestions == (str(sample_tree / "sub") + os.sep,)


class TestRenderSession:
    """Tests for render_session function."""

    def test_main_screen(self, app: SessionApp) -> None:
        text = _render_text(app)

        assert "Root:" in text
        assert "Max depth" in text
        assert "enter scan" in text

    def test_error_screen(self, app: SessionApp) -> None:
        app.session.last_error = RootUnreadableError("/missing", "No such file")
        app.session.state = SessionState.ERROR

        assert "Cannot read scan root /missing" in _render_text(app)

    def test_report_screen(self, app: SessionApp, sample_tree: Path) -> None:
        _complete(app, run_scan(sample_tree, ScanOptions()))

        assert "Total size" in _render_text(app)
