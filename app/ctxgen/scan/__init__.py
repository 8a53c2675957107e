"""Background scan coordination.

This module runs directory walks on worker threads and reports progress
and outcomes to a single-threaded UI through posted notifications.
"""

from ctxgen.scan.coordinator import ScanCoordinator, run_scan
from ctxgen.scan.messages import (
    ScanCancelled,
    ScanCompleted,
    ScanFailed,
    ScanNotification,
    ScanProgressed,
)

__all__ = [
    "ScanCancelled",
    "ScanCompleted",
    "ScanCoordinator",
    "ScanFailed",
    "ScanNotification",
    "ScanProgressed",
    "run_scan",
]
