"""Error taxonomy for directory scanning.

Only RootUnreadableError and InvalidSizeLimitError ever leave the
traversal engine as failures. EntryUnreadableError and InvalidPatternError
are absorbed per entry, and ScanCancelledError marks a cooperative abort,
which is reported as its own terminal status rather than as a failure.
"""


class ScanError(Exception):
    """Base exception for scan errors."""


class RootUnreadableError(ScanError):
    """Raised when the scan root cannot be opened or listed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read scan root {path}: {reason}")


class EntryUnreadableError(ScanError):
    """A single entry could not be read (permission denied, vanished, dead link)."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class InvalidPatternError(ScanError):
    """A glob pattern could not be parsed. It is treated as never matching."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(f"Invalid glob pattern: {pattern!r}")


class InvalidSizeLimitError(ScanError):
    """Raised when a file size limit is malformed or negative."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid file size limit: {value!r}")


class ScanCancelledError(ScanError):
    """Raised inside the walker when its cancellation token is set."""

    def __init__(self) -> None:
        super().__init__("Scan cancelled")
