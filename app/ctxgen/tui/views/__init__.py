"""Sub-controllers of the interactive session.

Each module holds the state and rendering of one screen: the file browser,
the scan progress display, the result report and the settings editor.
"""

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
from ctxgen.tui.views.report import ReportTab, ReportView
from ctxgen.tui.views.settings import SettingsView

__all__ = [
    "BrowserController",
    "Closed",
    "Controller",
    "ExportRequested",
    "Intent",
    "ReportTab",
    "ReportView",
    "ScanView",
    "SelectionConfirmed",
    "SettingsApplied",
    "SettingsView",
]
