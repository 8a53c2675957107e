"""Shared contract for interactive sub-controllers.

A sub-controller owns the state of one screen. The session hands it key
names and it answers with an optional intent; it never changes session
state itself.
"""

from dataclasses import dataclass
from typing import Protocol

from rich.console import RenderableType

from ctxgen.filesystem.models import ScanOptions

# Rows of a scrolling list shown at once
VISIBLE_ROWS = 15


@dataclass(frozen=True, slots=True)
class SelectionConfirmed:
    """The operator confirmed an explicit selection of paths."""

    paths: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SettingsApplied:
    """The operator applied edited options, optionally persisting them."""

    options: ScanOptions
    save: bool = False


@dataclass(frozen=True, slots=True)
class ExportRequested:
    """The operator asked to export the current result as a manifest."""


@dataclass(frozen=True, slots=True)
class Closed:
    """The sub-controller asked to return to the main screen."""


Intent = SelectionConfirmed | SettingsApplied | ExportRequested | Closed


class Controller(Protocol):
    """Interface shared by all sub-controllers."""

    def handle(self, key: str) -> Intent | None:
        """Process one key name and return an intent for the session, if any."""
        ...

    def render(self) -> RenderableType:
        """Build the renderable for the current state."""
        ...


def scroll_window(cursor: int, count: int, offset: int, height: int = VISIBLE_ROWS) -> int:
    """Return the scroll offset that keeps ``cursor`` within a window of ``height`` rows.

    Args:
        cursor: Index of the focused row.
        count: Number of rows.
        offset: Current scroll offset.
        height: Visible rows.

    Returns:
        New scroll offset.
    """
    if count <= height:
        return 0
    if cursor < offset:
        return cursor
    if cursor >= offset + height:
        return cursor - height + 1
    return min(offset, count - height)
