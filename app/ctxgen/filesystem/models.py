"""Filesystem domain models for traversal and scanning.

This module defines the immutable value objects produced and consumed
by the traversal engine: scan options, visited entries, aggregated
scan results and progress snapshots.
"""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from ctxgen import __version__
from ctxgen.filesystem.sizes import parse_size


class SortKey(str, Enum):
    """Ordering applied to scan results.

    Attributes:
        NAME: Lexicographic by root-relative path.
        SIZE: Ascending file size.
        MODIFIED: Ascending modification time.
    """

    NAME = "name"
    SIZE = "size"
    MODIFIED = "modified"

    @classmethod
    def parse(cls, value: "str | SortKey | None") -> "SortKey":
        """Map a sort key name to a SortKey, falling back to NAME."""
        if isinstance(value, SortKey):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NAME


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Filter configuration for a single scan.

    Options are immutable for the lifetime of a scan. Use ``with_changes``
    to derive a modified copy.

    Attributes:
        max_depth: 0 means unlimited. For d > 0 no entry with depth >= d is
            returned, so 1 keeps only entries directly under the root.
        max_file_size: Byte count or size string ("10MB"); 0 means unlimited.
        include_patterns: Basename globs; when non-empty a file must match one.
        exclude_patterns: Basename globs; a matching entry is always rejected.
        follow_symlinks: Follow symbolic links to files and directories.
        show_hidden: Include entries whose basename starts with ".".
        exclude_binary: Reject files detected as binary.
        recursive: False enumerates only the immediate children of the root.
        selected_paths: Explicit allow-list that replaces the normal walk.
        sort_by: Ordering of the returned entries.
    """

    max_depth: int = 0
    max_file_size: int | str = 0
    include_patterns: tuple[str, ...] = ()
    exclude_patterns: tuple[str, ...] = ()
    follow_symlinks: bool = False
    show_hidden: bool = False
    exclude_binary: bool = False
    recursive: bool = True
    selected_paths: tuple[str, ...] = ()
    sort_by: SortKey = SortKey.NAME

    def __post_init__(self) -> None:
        """Normalize sequences to tuples and validate depth."""
        if self.max_depth < 0:
            msg = f"max_depth must be >= 0, got {self.max_depth}"
            raise ValueError(msg)
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "include_patterns", tuple(self.include_patterns))
        object.__setattr__(self, "exclude_patterns", tuple(self.exclude_patterns))
        object.__setattr__(self, "selected_paths", tuple(self.selected_paths))
        object.__setattr__(self, "sort_by", SortKey.parse(self.sort_by))

    @property
    def max_file_size_bytes(self) -> int:
        """Resolved size limit in bytes.

        Raises:
            InvalidSizeLimitError: If the configured limit is malformed.
        """
        return parse_size(self.max_file_size)

    def with_changes(self, **changes: Any) -> "ScanOptions":
        """Return a copy of these options with the given fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True, slots=True)
class Entry:
    """A file or directory visited during traversal.

    Attributes:
        path: Absolute filesystem path.
        relative_path: POSIX path relative to the scan root.
        name: Basename.
        size: Size in bytes; directories always report 0.
        modified_at: Last modification time (UTC).
        is_directory: True for directories.
        is_hidden: True if the basename starts with ".".
        file_type: Lower-case extension without the dot, or "unknown".
        depth: Number of separators in relative_path (root children are 0).
    """

    path: str
    relative_path: str
    name: str
    size: int
    modified_at: datetime
    is_directory: bool
    is_hidden: bool
    file_type: str
    depth: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for manifest serialization."""
        return {
            "path": self.path,
            "relative_path": self.relative_path,
            "name": self.name,
            "size": self.size,
            "modified_at": self.modified_at.isoformat(),
            "is_directory": self.is_directory,
            "is_hidden": self.is_hidden,
            "file_type": self.file_type,
            "depth": self.depth,
        }


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Aggregated output of one scan.

    Counts and the total size are derived from the entry tuples so they
    always agree with them.

    Attributes:
        files: Selected file entries in result order.
        folders: Selected folder entries in result order.
        root_path: Root the scan started from.
        duration: Wall-clock scan time in seconds.
        finished_at: When the scan completed.
    """

    files: tuple[Entry, ...]
    folders: tuple[Entry, ...]
    root_path: str
    duration: float = 0.0
    finished_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def file_count(self) -> int:
        """Number of selected files."""
        return len(self.files)

    @property
    def folder_count(self) -> int:
        """Number of selected folders."""
        return len(self.folders)

    @property
    def total_size_bytes(self) -> int:
        """Sum of the sizes of all selected files."""
        return sum(f.size for f in self.files)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON/TOML serialization."""
        return {
            "metadata": {
                "root_path": self.root_path,
                "finished_at": self.finished_at.isoformat(),
                "duration_seconds": round(self.duration, 3),
                "ctxgen_version": __version__,
            },
            "summary": {
                "file_count": self.file_count,
                "folder_count": self.folder_count,
                "total_size_bytes": self.total_size_bytes,
            },
            "files": [f.to_dict() for f in self.files],
            "folders": [f.to_dict() for f in self.folders],
        }


@dataclass(frozen=True, slots=True)
class ScanProgress:
    """Snapshot of traversal progress.

    ``total`` is a best-effort estimate that may grow during the walk.

    Attributes:
        processed: Files evaluated so far (non-decreasing within a scan).
        total: Files discovered so far.
        current_path: Path most recently evaluated.
    """

    processed: int = 0
    total: int = 0
    current_path: str = ""

    @property
    def is_indeterminate(self) -> bool:
        """True while no total is known."""
        return self.total <= 0

    @property
    def fraction(self) -> float:
        """Completed fraction in [0.0, 1.0]; 0.0 when indeterminate."""
        if self.is_indeterminate:
            return 0.0
        return min(self.processed / self.total, 1.0)
