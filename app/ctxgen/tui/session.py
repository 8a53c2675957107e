"""Interactive session state machine.

The session is driven by a single thread that feeds it one message at a
time: key presses from the terminal, autocomplete suggestions, and scan
notifications posted by the coordinator. Handling a message may change
the session state and yields a Command for the runtime to execute (quit,
persist settings, export the result).

States::

    INIT -> INPUT <-> {SELECT, CONFIG, RESULT}
    INPUT -> PROCESSING -> RESULT | ERROR | INPUT (cancelled)
    ERROR -> INPUT
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum

from ctxgen.filesystem.models import ScanOptions, ScanResult
from ctxgen.scan.coordinator import ScanCoordinator
from ctxgen.scan.messages import (
    ScanCancelled,
    ScanCompleted,
    ScanFailed,
    ScanNotification,
    ScanProgressed,
)
from ctxgen.tui.views.base import (
    Closed,
    Controller,
    ExportRequested,
    Intent,
    SelectionConfirmed,
    SettingsApplied,
)
from ctxgen.tui.views.browser import BrowserController
from ctxgen.tui.views.progress import ScanView
from ctxgen.tui.views.report import ReportView
from ctxgen.tui.views.settings import SettingsView

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """States of the interactive session."""

    INIT = "init"
    INPUT = "input"
    SELECT = "select"
    CONFIG = "config"
    PROCESSING = "processing"
    RESULT = "result"
    ERROR = "error"


class ViewType(str, Enum):
    """Screen shown for each state."""

    MAIN = "main"
    BROWSER = "browser"
    PROGRESS = "progress"
    REPORT = "report"
    SETTINGS = "settings"
    ERROR = "error"


_VIEW_FOR_STATE: dict[SessionState, ViewType] = {
    SessionState.INIT: ViewType.MAIN,
    SessionState.INPUT: ViewType.MAIN,
    SessionState.SELECT: ViewType.BROWSER,
    SessionState.CONFIG: ViewType.SETTINGS,
    SessionState.PROCESSING: ViewType.PROGRESS,
    SessionState.RESULT: ViewType.REPORT,
    SessionState.ERROR: ViewType.ERROR,
}


class Command(str, Enum):
    """Side effects the runtime performs after a message was handled."""

    NONE = "none"
    QUIT = "quit"
    SAVE_SETTINGS = "save_settings"
    EXPORT_RESULT = "export_result"
    SUGGEST_PATHS = "suggest_paths"


class ScanOutcome(str, Enum):
    """How the most recent scan ended."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class KeyPressed:
    """A key read from the terminal, by name ("a", "enter", "up", "ctrl+c")."""

    key: str


@dataclass(frozen=True, slots=True)
class SuggestionsUpdated:
    """Autocomplete suggestions computed for ``prefix``."""

    prefix: str
    suggestions: tuple[str, ...]


Message = KeyPressed | SuggestionsUpdated | ScanNotification


class Session:
    """State machine for one interactive session.

    Args:
        coordinator: Coordinator used to run scans.
        options: Initial scan options.
        root_path: Initial root path input.
    """

    def __init__(
        self,
        coordinator: ScanCoordinator,
        *,
        options: ScanOptions | None = None,
        root_path: str = ".",
    ) -> None:
        self.coordinator = coordinator
        self.state = SessionState.INIT
        self.options = options or ScanOptions()
        self.root_path_input = root_path
        self.editing_path = False
        self.suggestions: tuple[str, ...] = ()
        self.status = ""

        self.last_result: ScanResult | None = None
        self.last_error: Exception | None = None
        self.last_outcome: ScanOutcome | None = None
        self.scan_snapshot: ScanOptions | None = None
        self.active_scan_id: int | None = None

        self.browser: BrowserController | None = None
        self.settings: SettingsView | None = None
        self.report: ReportView | None = None
        self.progress: ScanView | None = None

    @property
    def active_view(self) -> ViewType:
        """Screen for the current state."""
        return _VIEW_FOR_STATE[self.state]

    @property
    def active_controller(self) -> Controller | None:
        """Sub-controller that owns the current screen, if any."""
        if self.state == SessionState.SELECT:
            return self.browser
        if self.state == SessionState.CONFIG:
            return self.settings
        if self.state == SessionState.RESULT:
            return self.report
        if self.state == SessionState.PROCESSING:
            return self.progress
        return None

    def start(self) -> None:
        """Leave INIT once the first screen has been drawn."""
        if self.state == SessionState.INIT:
            self.state = SessionState.INPUT

    def handle(self, message: Message) -> tuple[SessionState, Command]:
        """Process one message.

        Args:
            message: Key press, suggestion update or scan notification.

        Returns:
            The state after handling and the command for the runtime.
        """
        self.start()

        if isinstance(message, KeyPressed):
            command = self._handle_key(message.key)
        elif isinstance(message, SuggestionsUpdated):
            if message.prefix == self.root_path_input:
                self.suggestions = message.suggestions
            command = Command.NONE
        else:
            self._handle_notification(message)
            command = Command.NONE
        return self.state, command

    # === Keys ===

    def _handle_key(self, key: str) -> Command:
        if key == "ctrl+c":
            if self.coordinator.is_running:
                self.coordinator.abort()
            return Command.QUIT

        if self.state == SessionState.INPUT:
            return self._handle_input_key(key)

        if self.state == SessionState.ERROR:
            if key in ("enter", "esc"):
                self.last_error = None
                self.state = SessionState.INPUT
            return Command.NONE

        if self.state == SessionState.PROCESSING:
            if key in ("a", "esc") and self.progress is not None and not self.progress.aborting:
                self.coordinator.abort()
                self.progress.aborting = True
            return Command.NONE

        if key == "esc":
            self._return_to_input()
            return Command.NONE

        controller = self.active_controller
        if controller is None:
            return Command.NONE
        try:
            intent = controller.handle(key)
        except Exception as e:
            logger.exception("Screen %s failed on key %r", self.active_view.value, key)
            self.last_error = e
            self.state = SessionState.ERROR
            return Command.NONE
        return self._apply_intent(intent)

    def _handle_input_key(self, key: str) -> Command:
        if self.editing_path:
            if key in ("enter", "esc"):
                self.editing_path = False
                return Command.NONE
            return self._edit_path(key)

        if key == "enter":
            self._begin_scan()
        elif key == "s":
            self.browser = BrowserController(
                self._root(),
                show_hidden=self.options.show_hidden,
                selected=self.options.selected_paths,
            )
            self.state = SessionState.SELECT
        elif key == "c":
            self.settings = SettingsView(self.options)
            self.state = SessionState.CONFIG
        elif key == "r":
            self.options = self.options.with_changes(recursive=not self.options.recursive)
        elif key == "h":
            self.options = self.options.with_changes(show_hidden=not self.options.show_hidden)
        elif key == "x":
            self.options = self.options.with_changes(selected_paths=())
            self.status = "Selection cleared"
        elif key == "e":
            self.editing_path = True
        elif key in ("q", "esc"):
            return Command.QUIT
        else:
            return self._edit_path(key)
        return Command.NONE

    def _edit_path(self, key: str) -> Command:
        if key == "tab":
            if self.suggestions:
                self.root_path_input = self.suggestions[0]
                self.suggestions = ()
                return Command.SUGGEST_PATHS
            return Command.NONE
        if key == "backspace":
            self.root_path_input = self.root_path_input[:-1]
        elif key == "space":
            self.root_path_input += " "
        elif len(key) == 1 and key.isprintable():
            self.root_path_input += key
        else:
            return Command.NONE
        self.suggestions = ()
        return Command.SUGGEST_PATHS

    # === Intents ===

    def _apply_intent(self, intent: Intent | None) -> Command:
        if intent is None:
            return Command.NONE
        if isinstance(intent, SelectionConfirmed):
            self.options = self.options.with_changes(selected_paths=intent.paths)
            self.status = f"{len(intent.paths)} paths selected"
            self._return_to_input()
        elif isinstance(intent, SettingsApplied):
            self.options = intent.options
            self.status = "Settings applied"
            self._return_to_input()
            if intent.save:
                return Command.SAVE_SETTINGS
        elif isinstance(intent, ExportRequested):
            if self.last_result is not None:
                return Command.EXPORT_RESULT
        elif isinstance(intent, Closed):
            self._return_to_input()
        return Command.NONE

    def _return_to_input(self) -> None:
        self.state = SessionState.INPUT
        self.browser = None
        self.settings = None

    # === Scans ===

    def _root(self) -> str:
        return os.path.expanduser(self.root_path_input.strip() or ".")

    def _begin_scan(self) -> None:
        root = self._root()
        snapshot = self.options
        scan_id = self.coordinator.start(root, snapshot)
        if scan_id is None:
            self.status = "A scan is already running"
            return

        self.active_scan_id = scan_id
        self.scan_snapshot = snapshot
        self.progress = ScanView(root)
        self.status = ""
        self.state = SessionState.PROCESSING

    def _handle_notification(self, message: ScanNotification) -> None:
        if self.state != SessionState.PROCESSING or message.scan_id != self.active_scan_id:
            logger.debug("Ignoring stale notification %r", message)
            return

        if isinstance(message, ScanProgressed):
            if self.progress is not None:
                self.progress.update(message.progress)
        elif isinstance(message, ScanCompleted):
            self.last_result = message.result
            self.last_error = None
            self.report = ReportView(message.result)
            self._finish_scan(ScanOutcome.COMPLETED)
            self.state = SessionState.RESULT
        elif isinstance(message, ScanCancelled):
            self._finish_scan(ScanOutcome.CANCELLED)
            self.status = "Scan cancelled"
            self.state = SessionState.INPUT
        elif isinstance(message, ScanFailed):
            self.last_error = message.error
            self._finish_scan(ScanOutcome.FAILED)
            self.state = SessionState.ERROR

    def _finish_scan(self, outcome: ScanOutcome) -> None:
        self.last_outcome = outcome
        self.scan_snapshot = None
        self.active_scan_id = None
        self.progress = None
