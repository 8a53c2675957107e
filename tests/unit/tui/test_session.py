"""Unit tests for the interactive session state machine.

The coordinator is replaced by a fake so notifications can be injected
synchronously.
"""

import logging
from pathlib import Path

import pytest
from ctxgen.filesystem.errors import RootUnreadableError
from ctxgen.filesystem.models import ScanOptions, ScanProgress, ScanResult, SortKey
from ctxgen.scan.messages import ScanCancelled, ScanCompleted, ScanFailed, ScanProgressed
from ctxgen.tui.session import (
    Command,
    KeyPressed,
    ScanOutcome,
    Session,
    SessionState,
    SuggestionsUpdated,
    ViewType,
)


class FakeCoordinator:
    """Records start and abort calls instead of running scans."""

    def __init__(self) -> None:
        self.started: list[tuple[str, ScanOptions]] = []
        self.aborted = 0
        self.running = False
        self.reject = False

    @property
    def is_running(self) -> bool:
        return self.running

    def start(self, root: str, options: ScanOptions) -> int | None:
        if self.reject:
            return None
        self.started.append((root, options))
        self.running = True
        return len(self.started)

    def abort(self) -> None:
        self.aborted += 1


def _result(root: str = "/project") -> ScanResult:
    return ScanResult(files=(), folders=(), root_path=root)


@pytest.fixture
def fake() -> FakeCoordinator:
    return FakeCoordinator()


@pytest.fixture
def session(fake: FakeCoordinator, sample_tree: Path) -> Session:
    s = Session(fake, root_path=str(sample_tree))  # type: ignore[arg-type]
    s.start()
    return s


def _press(session: Session, *keys: str) -> Command:
    command = Command.NONE
    for key in keys:
        _, command = session.handle(KeyPressed(key))
    return command


class TestStartup:
    """Tests for the INIT state."""

    def test_starts_in_init(self, fake: FakeCoordinator) -> None:
        session = Session(fake)  # type: ignore[arg-type]

        assert session.state == SessionState.INIT
        assert session.active_view == ViewType.MAIN

    def test_first_message_leaves_init(self, fake: FakeCoordinator) -> None:
        session = Session(fake)  # type: ignore[arg-type]

        state, _ = session.handle(KeyPressed("r"))

        assert state == SessionState.INPUT
        assert not session.options.recursive


class TestMainScreen:
    """Tests for keys on the main screen."""

    def test_quit(self, session: Session) -> None:
        assert _press(session, "q") == Command.QUIT

    def test_toggles(self, session: Session) -> None:
        _press(session, "r", "h")

        assert not session.options.recursive
        assert session.options.show_hidden

    def test_clear_selection(self, session: Session) -> None:
        session.options = session.options.with_changes(selected_paths=("/a",))

        _press(session, "x")

        assert session.options.selected_paths == ()

    def test_open_browser(self, session: Session) -> None:
        _press(session, "s")

        assert session.state == SessionState.SELECT
        assert session.active_view == ViewType.BROWSER
        assert session.browser is not None

    def test_open_settings(self, session: Session) -> None:
        _press(session, "c")

        assert session.state == SessionState.CONFIG
        assert session.active_controller is session.settings

    def test_escape_returns_to_main(self, session: Session) -> None:
        _press(session, "c", "esc")

        assert session.state == SessionState.INPUT
        assert session.settings is None


class TestPathEditing:
    """Tests for the root path input."""

    def test_edit_mode(self, session: Session) -> None:
        session.root_path_input = ""

        command = _press(session, "e", "s", "r", "c")

        assert session.root_path_input == "src"
        assert session.state == SessionState.INPUT
        assert command == Command.SUGGEST_PATHS

    def test_leave_edit_mode(self, session: Session) -> None:
        _press(session, "e", "enter")

        assert not session.editing_path
        assert session.state == SessionState.INPUT

    def test_backspace(self, session: Session) -> None:
        session.root_path_input = "abc"

        _press(session, "backspace")

        assert session.root_path_input == "ab"

    def test_suggestions_for_current_input(self, session: Session) -> None:
        session.root_path_input = "sr"

        session.handle(SuggestionsUpdated(prefix="sr", suggestions=("src/",)))
        command = _press(session, "tab")

        assert session.root_path_input == "src/"
        assert command == Command.SUGGEST_PATHS

    def test_stale_suggestions_ignored(self, session: Session) -> None:
        session.root_path_input = "sr"

        session.handle(SuggestionsUpdated(prefix="s", suggestions=("scripts/",)))

        assert session.suggestions == ()

    def test_tab_without_suggestions(self, session: Session) -> None:
        assert _press(session, "tab") == Command.NONE


class TestScanFlow:
    """Tests for PROCESSING and its outcomes."""

    def test_enter_starts_scan(self, session: Session, fake: FakeCoordinator) -> None:
        session.options = session.options.with_changes(sort_by=SortKey.SIZE)

        state, _ = session.handle(KeyPressed("enter"))

        assert state == SessionState.PROCESSING
        assert session.active_scan_id == 1
        assert session.scan_snapshot is session.options
        assert fake.started[0][1].sort_by is SortKey.SIZE

    def test_busy_coordinator(self, session: Session, fake: FakeCoordinator) -> None:
        fake.reject = True

        state, _ = session.handle(KeyPressed("enter"))

        assert state == SessionState.INPUT
        assert "already running" in session.status

    def test_progress_updates_view(self, session: Session) -> None:
        _press(session, "enter")

        session.handle(ScanProgressed(1, ScanProgress(processed=2, total=5)))

        assert session.progress is not None
        assert session.progress.progress.processed == 2

    def test_completed(self, session: Session) -> None:
        _press(session, "enter")
        result = _result()

        state, _ = session.handle(ScanCompleted(1, result))

        assert state == SessionState.RESULT
        assert session.last_result is result
        assert session.last_outcome == ScanOutcome.COMPLETED
        assert session.active_scan_id is None
        assert session.report is not None

    def test_cancelled(self, session: Session) -> None:
        _press(session, "enter")

        state, _ = session.handle(ScanCancelled(1))

        assert state == SessionState.INPUT
        assert session.last_outcome == ScanOutcome.CANCELLED
        assert session.status == "Scan cancelled"

    def test_failed(self, session: Session) -> None:
        _press(session, "enter")
        error = RootUnreadableError("/missing", "No such file or directory")

        state, _ = session.handle(ScanFailed(1, error))

        assert state == SessionState.ERROR
        assert session.last_error is error
        assert session.active_view == ViewType.ERROR

    def test_error_acknowledged(self, session: Session) -> None:
        _press(session, "enter")
        session.handle(ScanFailed(1, RootUnreadableError("/x", "gone")))

        _press(session, "enter")

        assert session.state == SessionState.INPUT
        assert session.last_error is None

    def test_stale_notification_ignored(
        self, session: Session, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="ctxgen.tui.session")
        _press(session, "enter")

        state, _ = session.handle(ScanCompleted(99, _result()))

        assert state == SessionState.PROCESSING
        assert "stale" in caplog.text

    def test_notification_outside_processing_ignored(self, session: Session) -> None:
        state, _ = session.handle(ScanCompleted(1, _result()))

        assert state == SessionState.INPUT
        assert session.last_result is None

    def test_abort_once(self, session: Session, fake: FakeCoordinator) -> None:
        _press(session, "enter")

        _press(session, "a", "esc")

        assert fake.aborted == 1
        assert session.progress is not None
        assert session.progress.aborting
        assert session.state == SessionState.PROCESSING

    def test_other_keys_ignored_while_processing(self, session: Session) -> None:
        _press(session, "enter")

        assert _press(session, "q") == Command.NONE
        assert session.state == SessionState.PROCESSING

    def test_ctrl_c_aborts_and_quits(self, session: Session, fake: FakeCoordinator) -> None:
        _press(session, "enter")

        command = _press(session, "ctrl+c")

        assert command == Command.QUIT
        assert fake.aborted == 1


class TestIntents:
    """Tests for intents returned by sub-controllers."""

    def test_selection_confirmed(self, session: Session, sample_tree: Path) -> None:
        _press(session, "s", "space", "enter")

        assert session.state == SessionState.INPUT
        assert session.options.selected_paths == (str(sample_tree / "sub"),)

    def test_settings_applied(self, session: Session) -> None:
        command = _press(session, "c", "down", "down", "down", "down", "space", "a")

        assert command == Command.NONE
        assert session.options.follow_symlinks
        assert session.state == SessionState.INPUT

    def test_settings_saved(self, session: Session) -> None:
        assert _press(session, "c", "s") == Command.SAVE_SETTINGS

    def test_export_from_report(self, session: Session) -> None:
        _press(session, "enter")
        session.handle(ScanCompleted(1, _result()))

        assert _press(session, "e") == Command.EXPORT_RESULT

    def test_back_from_report(self, session: Session) -> None:
        _press(session, "enter")
        session.handle(ScanCompleted(1, _result()))

        _press(session, "b")

        assert session.state == SessionState.INPUT
        assert session.last_result is not None

    def test_controller_failure_enters_error(self, session: Session) -> None:
        _press(session, "c")
        assert session.settings is not None

        def boom(key: str) -> None:
            raise RuntimeError("broken screen")

        session.settings.handle = boom  # type: ignore[method-assign]
        _press(session, "down")

        assert session.state == SessionState.ERROR
        assert str(session.last_error) == "broken screen"
