"""Filesystem traversal and selection module.

This module provides the scan error taxonomy, entry and option models,
glob pattern matching, binary detection, and the directory walker that
turns a directory tree into an ordered selection of entries.
"""

from ctxgen.filesystem.errors import (
    EntryUnreadableError,
    InvalidPatternError,
    InvalidSizeLimitError,
    RootUnreadableError,
    ScanCancelledError,
    ScanError,
)
from ctxgen.filesystem.models import Entry, ScanOptions, ScanProgress, ScanResult, SortKey
from ctxgen.filesystem.patterns import PatternSet, is_valid_pattern, matches, matches_fuzzy
from ctxgen.filesystem.walker import (
    CancellationToken,
    DirectoryWalker,
    Selection,
    list_directory,
    select_entries,
    sort_entries,
)

__all__ = [
    "CancellationToken",
    "DirectoryWalker",
    "Entry",
    "EntryUnreadableError",
    "InvalidPatternError",
    "InvalidSizeLimitError",
    "PatternSet",
    "RootUnreadableError",
    "ScanCancelledError",
    "ScanError",
    "ScanOptions",
    "ScanProgress",
    "ScanResult",
    "Selection",
    "SortKey",
    "is_valid_pattern",
    "list_directory",
    "matches",
    "matches_fuzzy",
    "select_entries",
    "sort_entries",
]
