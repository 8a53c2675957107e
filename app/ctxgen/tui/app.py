"""Interactive session runtime.

Owns the UI thread: it pulls messages from a single queue fed by the key
reader, the scan coordinator and autocomplete lookups, hands them to the
Session, executes the resulting commands and redraws the screen.
"""

import logging
import queue
import threading
from pathlib import Path

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ctxgen import __version__
from ctxgen.core.config import ConfigError, Settings, save_settings
from ctxgen.core.manifest import ManifestError, default_export_path, export_manifest
from ctxgen.filesystem.models import ScanOptions, ScanResult
from ctxgen.scan.coordinator import ScanCoordinator
from ctxgen.tui.autocomplete import suggest_paths
from ctxgen.tui.session import (
    Command,
    KeyPressed,
    Message,
    Session,
    SessionState,
    SuggestionsUpdated,
    ViewType,
)
from ctxgen.tui.terminal import KeyReader, RawTerminal
from ctxgen.utils.formatting import console as default_console

logger = logging.getLogger(__name__)

# Seconds between redraws while no message arrives
REFRESH_INTERVAL = 0.1

MAIN_HELP = (
    "enter scan  e edit path  tab complete  s select  c settings  "
    "r recursive  h hidden  x clear selection  q quit"
)


def render_main(session: Session) -> RenderableType:
    """Render the main screen: root path input and current options."""
    options = session.options
    path = Text("Root: ", style="muted")
    path.append(session.root_path_input, style="text")
    if session.editing_path:
        path.append("▏", style="info")
    rows: list[RenderableType] = [path]

    if session.suggestions:
        rows.append(Text(f"tab → {session.suggestions[0]}", style="muted"))

    table = Table.grid(padding=(0, 2))
    table.add_column(style="muted")
    table.add_column(style="text")
    table.add_row("Recursive", "yes" if options.recursive else "no")
    table.add_row("Show hidden", "yes" if options.show_hidden else "no")
    table.add_row("Max depth", str(options.max_depth) if options.max_depth else "unlimited")
    size_limit = str(options.max_file_size) if options.max_file_size else "unlimited"
    table.add_row("Max file size", size_limit)
    table.add_row("Include", ", ".join(options.include_patterns) or "-")
    table.add_row("Exclude", ", ".join(options.exclude_patterns) or "-")
    table.add_row("Sort by", options.sort_by.value)
    if options.selected_paths:
        table.add_row("Selection", f"{len(options.selected_paths)} paths")
    rows.append(table)

    if session.last_outcome is not None:
        rows.append(Text(f"Last scan: {session.last_outcome.value}", style="muted"))
    if session.status:
        rows.append(Text(session.status, style="info"))
    rows.append(Text(MAIN_HELP, style="muted"))
    return Panel(Group(*rows), title=f"ctxgen {__version__}", border_style="border")


def render_error(session: Session) -> RenderableType:
    """Render the error screen for the last failure."""
    message = str(session.last_error) if session.last_error else "Unknown error"
    return Panel(
        Group(Text(message, style="error"), Text("enter/esc continue", style="muted")),
        title="Error",
        border_style="error",
    )


def render_session(session: Session) -> RenderableType:
    """Render the screen for the session's current state."""
    view = session.active_view
    if view == ViewType.ERROR:
        return render_error(session)
    controller = session.active_controller
    if view == ViewType.MAIN or controller is None:
        return render_main(session)
    return controller.render()


class SessionApp:
    """Runs a Session against the real terminal.

    Args:
        root_path: Initial root path.
        options: Initial scan options.
        settings_path: Where to save settings. If None, uses the default path.
        console: Console to draw on.
    """

    def __init__(
        self,
        root_path: str = ".",
        options: ScanOptions | None = None,
        settings_path: Path | None = None,
        console: Console | None = None,
    ) -> None:
        self.queue: queue.Queue[Message] = queue.Queue()
        self.coordinator = ScanCoordinator(self.queue.put)
        self.session = Session(self.coordinator, options=options, root_path=root_path)
        self.settings_path = settings_path
        self.console = console or default_console

    def run(self) -> ScanResult | None:
        """Run the session until the operator quits.

        Returns:
            The last completed scan result, if any.
        """
        with (
            RawTerminal() as terminal,
            Live(
                render_session(self.session),
                console=self.console,
                screen=True,
                auto_refresh=False,
            ) as live,
        ):
            reader = KeyReader(terminal, lambda key: self.queue.put(KeyPressed(key)))
            reader.start()
            self.session.start()
            try:
                self._loop(live)
            finally:
                reader.stop()
                self.coordinator.abort()
                self.coordinator.wait(timeout=1.0)
        return self.session.last_result

    def _loop(self, live: Live) -> None:
        while True:
            try:
                message = self.queue.get(timeout=REFRESH_INTERVAL)
            except queue.Empty:
                if self.session.state == SessionState.PROCESSING:
                    live.update(render_session(self.session), refresh=True)
                continue

            _, command = self.session.handle(message)
            if not self.execute(command):
                return
            live.update(render_session(self.session), refresh=True)

    def execute(self, command: Command) -> bool:
        """Perform a session command.

        Returns:
            False if the session should end.
        """
        if command == Command.QUIT:
            return False
        if command == Command.SAVE_SETTINGS:
            self._save_settings()
        elif command == Command.EXPORT_RESULT:
            self._export_result()
        elif command == Command.SUGGEST_PATHS:
            prefix = self.session.root_path_input
            threading.Thread(
                target=self._suggest, args=(prefix,), name="ctxgen-suggest", daemon=True
            ).start()
        return True

    def _save_settings(self) -> None:
        try:
            settings = Settings.from_scan_options(self.session.options)
            path = save_settings(settings, self.settings_path)
        except (ConfigError, ValueError) as e:
            logger.warning("Saving settings failed: %s", e)
            self.session.status = f"Could not save settings: {e}"
            return
        self.session.status = f"Settings saved to {path}"

    def _export_result(self) -> None:
        result = self.session.last_result
        if result is None:
            return
        try:
            path = export_manifest(result, default_export_path(result))
        except ManifestError as e:
            logger.warning("Export failed: %s", e)
            status = f"Export failed: {e}"
        else:
            status = f"Manifest written to {path}"
        self.session.status = status
        if self.session.report is not None:
            self.session.report.status = status

    def _suggest(self, prefix: str) -> None:
        suggestions = suggest_paths(prefix)
        self.queue.put(SuggestionsUpdated(prefix=prefix, suggestions=tuple(suggestions)))
