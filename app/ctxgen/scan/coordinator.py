"""Background scan coordination.

The coordinator runs one directory walk at a time on a worker thread and
reports to the UI exclusively through the ``post`` callable it was given,
normally the ``put`` method of the UI message queue. The UI thread never
touches the walk's state directly, and the worker never touches UI state.

Each scan uses two daemon threads:

- the worker runs the walk and records progress in a lock-guarded tracker;
- the pacer wakes every ``tick_interval`` seconds and posts the tracker's
  snapshot when it changed.

The pacer is stopped and joined before the final progress snapshot and
the terminal notification are posted, so no tick ever follows them.
"""

import logging
import os
import threading
import time
from collections.abc import Callable
from pathlib import Path

from ctxgen.filesystem.errors import InvalidSizeLimitError, ScanCancelledError, ScanError
from ctxgen.filesystem.models import ScanOptions, ScanProgress, ScanResult
from ctxgen.filesystem.sizes import parse_size
from ctxgen.filesystem.walker import CancellationToken, ProgressCallback, select_entries
from ctxgen.scan.messages import (
    ScanCancelled,
    ScanCompleted,
    ScanFailed,
    ScanNotification,
    ScanProgressed,
    TerminalNotification,
)

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 0.1


class _ProgressTracker:
    """Latest walker progress, written by the worker and read by the pacer."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._progress = ScanProgress()

    def update(self, processed: int, total: int, current_path: str) -> None:
        with self._lock:
            self._progress = ScanProgress(
                processed=processed,
                total=total,
                current_path=current_path or self._progress.current_path,
            )

    def snapshot(self) -> ScanProgress:
        with self._lock:
            return self._progress


class ScanCoordinator:
    """Runs scans in the background and posts notifications about them.

    At most one scan is in flight. Every started scan ends with exactly one
    terminal notification: ScanCompleted, ScanCancelled or ScanFailed.

    Args:
        post: Callable that delivers a notification to the UI thread.
        tick_interval: Seconds between progress snapshots.
    """

    def __init__(
        self,
        post: Callable[[ScanNotification], None],
        *,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
    ) -> None:
        self._post = post
        self._tick_interval = tick_interval
        self._lock = threading.Lock()
        self._last_id = 0
        self._running = False
        self._token: CancellationToken | None = None
        self._worker: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """True while a scan is in flight."""
        with self._lock:
            return self._running

    def start(self, root: str | Path, options: ScanOptions) -> int | None:
        """Start a scan of ``root`` in the background.

        An invalid size limit is reported as ScanFailed without starting
        a worker.

        Args:
            root: Directory to scan.
            options: Filter configuration for the scan.

        Returns:
            The id of the new scan, or None if a scan is already running.
        """
        with self._lock:
            if self._running:
                logger.warning("Scan already in progress; ignoring start request")
                return None

            self._last_id += 1
            scan_id = self._last_id

            try:
                parse_size(options.max_file_size)
            except InvalidSizeLimitError as e:
                logger.warning("Scan %d rejected: %s", scan_id, e)
                self._post(ScanFailed(scan_id, e))
                return scan_id

            self._running = True
            self._token = CancellationToken()
            self._worker = threading.Thread(
                target=self._run,
                args=(scan_id, os.fspath(root), options, self._token),
                name=f"ctxgen-scan-{scan_id}",
                daemon=True,
            )
            self._worker.start()

        logger.info("Scan %d started for %s", scan_id, root)
        return scan_id

    def abort(self) -> None:
        """Request cooperative cancellation of the running scan, if any."""
        with self._lock:
            if self._running and self._token is not None:
                logger.info("Scan %d cancellation requested", self._last_id)
                self._token.cancel()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the current worker finishes.

        Args:
            timeout: Maximum seconds to wait, or None to wait indefinitely.

        Returns:
            True if no worker is running any more.
        """
        worker = self._worker
        if worker is None:
            return True
        worker.join(timeout)
        return not worker.is_alive()

    def _run(
        self,
        scan_id: int,
        root: str,
        options: ScanOptions,
        token: CancellationToken,
    ) -> None:
        """Worker thread body."""
        tracker = _ProgressTracker()
        stop = threading.Event()
        pacer = threading.Thread(
            target=self._pace,
            args=(scan_id, tracker, stop),
            name=f"ctxgen-pacer-{scan_id}",
            daemon=True,
        )
        pacer.start()

        started = time.monotonic()
        notification: TerminalNotification
        try:
            selection = select_entries(root, options, cancel=token, on_progress=tracker.update)
        except ScanCancelledError:
            logger.info("Scan %d cancelled", scan_id)
            notification = ScanCancelled(scan_id)
        except ScanError as e:
            logger.warning("Scan %d failed: %s", scan_id, e)
            notification = ScanFailed(scan_id, e)
        except Exception as e:
            logger.exception("Scan %d crashed", scan_id)
            msg = f"Unexpected error during scan: {e}"
            error = ScanError(msg)
            error.__cause__ = e
            notification = ScanFailed(scan_id, error)
        else:
            result = ScanResult(
                files=selection.files,
                folders=selection.folders,
                root_path=os.path.abspath(root),
                duration=time.monotonic() - started,
            )
            notification = ScanCompleted(scan_id, result)
        finally:
            stop.set()
            pacer.join()

        if isinstance(notification, ScanCompleted):
            last = tracker.snapshot()
            self._post(
                ScanProgressed(
                    scan_id,
                    ScanProgress(processed=last.total, total=last.total, current_path=""),
                )
            )

        with self._lock:
            self._running = False
            self._token = None
        self._post(notification)

    def _pace(self, scan_id: int, tracker: _ProgressTracker, stop: threading.Event) -> None:
        """Pacer thread body: post changed snapshots until stopped."""
        last: ScanProgress | None = None
        while not stop.wait(self._tick_interval):
            progress = tracker.snapshot()
            if progress != last:
                self._post(ScanProgressed(scan_id, progress))
                last = progress


def run_scan(
    root: str | Path,
    options: ScanOptions,
    *,
    on_progress: ProgressCallback | None = None,
    cancel: CancellationToken | None = None,
) -> ScanResult:
    """Scan ``root`` synchronously on the calling thread.

    Args:
        root: Directory to scan.
        options: Filter configuration.
        on_progress: Optional callback receiving (processed, total, current_path).
        cancel: Optional cancellation token.

    Returns:
        Aggregated scan result.

    Raises:
        ScanError: If the root is unreadable, the size limit is malformed,
            or the scan was cancelled.
    """
    started = time.monotonic()
    selection = select_entries(root, options, cancel=cancel, on_progress=on_progress)
    return ScanResult(
        files=selection.files,
        folders=selection.folders,
        root_path=os.path.abspath(os.fspath(root)),
        duration=time.monotonic() - started,
    )
