"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.table import Table

from ctxgen.core.theme import get_theme
from ctxgen.filesystem.models import Entry
from ctxgen.filesystem.sizes import format_size


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_entry_table(title: str = "Selected Files") -> Table:
    """Create a pre-configured table for displaying scan entries.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for entry display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],  # Zebra striping for readability
    )
    table.add_column("Path", style="file", no_wrap=True, overflow="ellipsis")
    table.add_column("Type", style="muted")
    table.add_column("Size", style="info", justify="right")
    table.add_column("Modified", style="muted")
    return table


def format_entry_row(entry: Entry) -> tuple[str, str, str, str]:
    """Format an entry as a table row.

    Args:
        entry: File or folder entry.

    Returns:
        Tuple of (path, type, size, modified) with Rich markup.
    """
    style = "directory" if entry.is_directory else "hidden" if entry.is_hidden else "file"
    path = f"[{style}]{entry.relative_path}[/]"
    size = "-" if entry.is_directory else format_size(entry.size)
    modified = entry.modified_at.strftime("%Y-%m-%d %H:%M")
    return (path, entry.file_type, size, modified)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
