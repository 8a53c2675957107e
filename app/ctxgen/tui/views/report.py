"""Result screen for a completed scan."""

from enum import Enum

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ctxgen.filesystem.models import Entry, ScanResult
from ctxgen.filesystem.sizes import format_size
from ctxgen.tui.views.base import VISIBLE_ROWS, Closed, ExportRequested, Intent
from ctxgen.utils.formatting import create_entry_table, format_entry_row

HELP = "tab switch  ↑↓ scroll  e export  b back  esc back"


class ReportTab(str, Enum):
    """Tabs of the result screen."""

    OVERVIEW = "overview"
    FILES = "files"
    FOLDERS = "folders"


_TAB_ORDER = list(ReportTab)


class ReportView:
    """Browse the files and folders of a scan result.

    Args:
        result: Completed scan result.
        height: Visible rows in the entry tabs.
    """

    def __init__(self, result: ScanResult, height: int = VISIBLE_ROWS) -> None:
        self.result = result
        self.height = height
        self.tab = ReportTab.OVERVIEW
        self.offset = 0
        self.status = ""

    @property
    def rows(self) -> tuple[Entry, ...]:
        """Entries listed on the active tab."""
        if self.tab == ReportTab.FILES:
            return self.result.files
        if self.tab == ReportTab.FOLDERS:
            return self.result.folders
        return ()

    def handle(self, key: str) -> Intent | None:
        if key == "tab":
            index = _TAB_ORDER.index(self.tab)
            self.tab = _TAB_ORDER[(index + 1) % len(_TAB_ORDER)]
            self.offset = 0
        elif key in ("up", "k"):
            self.offset = max(self.offset - 1, 0)
        elif key in ("down", "j"):
            self.offset = min(self.offset + 1, max(len(self.rows) - self.height, 0))
        elif key == "e":
            return ExportRequested()
        elif key == "b":
            return Closed()
        return None

    def render(self) -> RenderableType:
        tabs = Text()
        for tab in _TAB_ORDER:
            style = "tab.active" if tab == self.tab else "tab.inactive"
            tabs.append(f" {tab.value.title()} ", style=style)
            tabs.append(" ")

        body: RenderableType
        if self.tab == ReportTab.OVERVIEW:
            body = self._render_overview()
        else:
            body = self._render_entries()

        rows: list[RenderableType] = [tabs, body]
        if self.status:
            rows.append(Text(self.status, style="success"))
        rows.append(Text(HELP, style="muted"))
        return Panel(Group(*rows), title="Result", border_style="border")

    def _render_overview(self) -> Table:
        result = self.result
        table = Table.grid(padding=(0, 2))
        table.add_column(style="muted")
        table.add_column(style="text")
        table.add_row("Root", result.root_path)
        table.add_row("Files", str(result.file_count))
        table.add_row("Folders", str(result.folder_count))
        table.add_row("Total size", format_size(result.total_size_bytes))
        table.add_row("Duration", f"{result.duration:.2f}s")
        table.add_row("Finished", result.finished_at.strftime("%Y-%m-%d %H:%M:%S UTC"))
        return table

    def _render_entries(self) -> RenderableType:
        entries = self.rows
        if not entries:
            return Text("Nothing selected.", style="muted")

        end = min(self.offset + self.height, len(entries))
        table = create_entry_table(title=f"{self.offset + 1}-{end} of {len(entries)}")
        for entry in entries[self.offset : end]:
            table.add_row(*format_entry_row(entry))
        return table
