"""Interactive file browser for building an explicit selection."""

import logging
import os

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from ctxgen.filesystem.errors import RootUnreadableError
from ctxgen.filesystem.models import Entry
from ctxgen.filesystem.patterns import matches_fuzzy
from ctxgen.filesystem.sizes import format_size
from ctxgen.filesystem.walker import list_directory
from ctxgen.tui.views.base import VISIBLE_ROWS, Intent, SelectionConfirmed, scroll_window

logger = logging.getLogger(__name__)

HELP = (
    "↑↓ move  space toggle  a all  n none  i invert  → open  ← parent  "
    "/ filter  enter confirm  esc back"
)


class BrowserController:
    """Browse a directory tree and toggle entries into a selection.

    The selection is kept as absolute paths, so it survives moving between
    directories. Navigation never leaves the directory the browser was
    opened on.

    Args:
        root: Directory to browse.
        show_hidden: List dot entries.
        selected: Paths that start out selected.
        height: Visible rows.
    """

    def __init__(
        self,
        root: str,
        *,
        show_hidden: bool = False,
        selected: tuple[str, ...] = (),
        height: int = VISIBLE_ROWS,
    ) -> None:
        self.root = os.path.abspath(root)
        self.path = self.root
        self.show_hidden = show_hidden
        self.height = height
        self.selected: set[str] = {os.path.abspath(p) for p in selected}
        self.items: list[Entry] = []
        self.cursor = 0
        self.offset = 0
        self.filter = ""
        self.filtering = False
        self.error: str | None = None
        self._load()

    @property
    def visible_items(self) -> list[Entry]:
        """Items that pass the current filter."""
        if not self.filter:
            return self.items
        return [item for item in self.items if matches_fuzzy((self.filter,), item.name)]

    @property
    def current(self) -> Entry | None:
        """Item under the cursor."""
        items = self.visible_items
        if not items:
            return None
        return items[self.cursor]

    def _load(self) -> None:
        try:
            self.items = list_directory(self.path, show_hidden=self.show_hidden)
            self.error = None
        except RootUnreadableError as e:
            logger.debug("Browser cannot list %s: %s", self.path, e)
            self.items = []
            self.error = str(e)
        self.cursor = 0
        self.offset = 0

    def handle(self, key: str) -> Intent | None:
        if self.filtering:
            self._edit_filter(key)
            return None

        if key in ("up", "k"):
            self._move(-1)
        elif key in ("down", "j"):
            self._move(1)
        elif key == "space":
            self._toggle()
        elif key == "a":
            self.selected.update(item.path for item in self.visible_items)
        elif key == "n":
            self.selected.difference_update(item.path for item in self.visible_items)
        elif key == "i":
            self.selected.symmetric_difference_update({item.path for item in self.visible_items})
        elif key in ("right", "l"):
            self._open()
        elif key in ("left", "h", "backspace"):
            self._parent()
        elif key == "/":
            self.filtering = True
            self.filter = ""
            self.cursor = 0
            self.offset = 0
        elif key == "enter":
            return SelectionConfirmed(tuple(sorted(self.selected)))
        return None

    def _edit_filter(self, key: str) -> None:
        if key == "enter":
            self.filtering = False
        elif key == "backspace":
            self.filter = self.filter[:-1]
        elif key == "space":
            self.filter += " "
        elif len(key) == 1 and key.isprintable():
            self.filter += key
        self.cursor = 0
        self.offset = 0

    def _move(self, step: int) -> None:
        count = len(self.visible_items)
        if count == 0:
            return
        self.cursor = (self.cursor + step) % count
        self.offset = scroll_window(self.cursor, count, self.offset, self.height)

    def _toggle(self) -> None:
        item = self.current
        if item is None:
            return
        if item.path in self.selected:
            self.selected.discard(item.path)
        else:
            self.selected.add(item.path)

    def _open(self) -> None:
        item = self.current
        if item is None or not item.is_directory:
            return
        self.path = item.path
        self.filter = ""
        self._load()

    def _parent(self) -> None:
        if self.path == self.root:
            return
        self.path = os.path.dirname(self.path)
        self.filter = ""
        self._load()

    def render(self) -> RenderableType:
        rows: list[RenderableType] = [Text(f"Path: {self.path}", style="header")]
        if self.error:
            rows.append(Text(self.error, style="error"))

        items = self.visible_items
        if self.filtering or self.filter:
            cursor = "▏" if self.filtering else ""
            rows.append(Text(f"Filter: {self.filter}{cursor}", style="info"))

        if not items:
            rows.append(Text("(empty)", style="muted"))
        else:
            end = min(self.offset + self.height, len(items))
            rows.append(
                Text(f"Showing {self.offset + 1}-{end} of {len(items)}", style="muted")
            )
            for index in range(self.offset, end):
                rows.append(self._render_item(items[index], index == self.cursor))

        rows.append(Text(f"{len(self.selected)} selected", style="selected"))
        rows.append(Text(HELP, style="muted"))
        return Panel(Group(*rows), title="Select files", border_style="border")

    def _render_item(self, item: Entry, focused: bool) -> Text:
        mark = "[x]" if item.path in self.selected else "[ ]"
        name = f"{item.name}/" if item.is_directory else item.name
        size = "" if item.is_directory else format_size(item.size)
        style = "directory" if item.is_directory else "hidden" if item.is_hidden else "file"
        line = Text(f"{mark} ")
        line.append(name, style=style)
        if size:
            line.append(f"  {size}", style="muted")
        if focused:
            line.stylize("cursor")
        return line
