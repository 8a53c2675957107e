"""Progress screen shown while a scan runs."""

import time

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.text import Text

from ctxgen.filesystem.models import ScanProgress
from ctxgen.tui.views.base import Intent


class ScanView:
    """Displays the latest progress snapshot of the active scan.

    Keys are handled by the session (abort and force quit), so this view
    only renders.
    """

    def __init__(self, root: str) -> None:
        self.root = root
        self.progress = ScanProgress()
        self.aborting = False
        self.started = time.monotonic()

    def update(self, progress: ScanProgress) -> None:
        """Replace the displayed snapshot."""
        self.progress = progress

    def handle(self, key: str) -> Intent | None:
        return None

    def render(self) -> RenderableType:
        progress = self.progress
        elapsed = time.monotonic() - self.started
        rows: list[RenderableType] = [Text(f"Scanning {self.root}", style="header")]

        if progress.is_indeterminate:
            rows.append(
                ProgressBar(total=None, pulse=True, style="border", complete_style="progress")
            )
            rows.append(Text("Discovering files...", style="muted"))
        else:
            rows.append(
                ProgressBar(
                    total=progress.total,
                    completed=progress.processed,
                    style="border",
                    complete_style="progress",
                    finished_style="success",
                )
            )
            rows.append(
                Text(
                    f"{progress.fraction:.0%}  {progress.processed}/{progress.total} files  "
                    f"{elapsed:.1f}s",
                    style="info",
                )
            )

        if progress.current_path:
            rows.append(
                Text(progress.current_path, style="muted", overflow="ellipsis", no_wrap=True)
            )

        if self.aborting:
            rows.append(Text("Cancelling...", style="warning"))
        else:
            rows.append(Text("a/esc abort  ctrl+c quit", style="muted"))
        return Panel(Group(*rows), title="Processing", border_style="border")
