"""Notifications posted by the scan coordinator to the UI queue.

Every notification carries the id of the scan that produced it so the
receiver can drop notifications that belong to an earlier scan.
"""

from dataclasses import dataclass

from ctxgen.filesystem.models import ScanProgress, ScanResult


@dataclass(frozen=True, slots=True)
class ScanProgressed:
    """Periodic progress snapshot of a running scan."""

    scan_id: int
    progress: ScanProgress


@dataclass(frozen=True, slots=True)
class ScanCompleted:
    """Terminal notification: the scan finished with a result."""

    scan_id: int
    result: ScanResult


@dataclass(frozen=True, slots=True)
class ScanCancelled:
    """Terminal notification: the scan was aborted by request."""

    scan_id: int


@dataclass(frozen=True, slots=True)
class ScanFailed:
    """Terminal notification: the scan could not complete.

    Attributes:
        scan_id: Id of the failed scan.
        error: The ScanError describing the failure.
    """

    scan_id: int
    error: Exception


ScanNotification = ScanProgressed | ScanCompleted | ScanCancelled | ScanFailed
TerminalNotification = ScanCompleted | ScanCancelled | ScanFailed
