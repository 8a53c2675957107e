"""Directory traversal and selection engine.

Walks a rooted directory tree depth-first and turns it into an ordered
selection of file and folder entries according to ScanOptions: depth
cutoff, hidden-entry visibility, include/exclude patterns, size limit and
binary detection. Per-entry failures are absorbed; only an unreadable
root aborts a walk.
"""

import logging
import os
import stat
import threading
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import cmp_to_key
from pathlib import Path

from ctxgen.filesystem.errors import (
    EntryUnreadableError,
    RootUnreadableError,
    ScanCancelledError,
)
from ctxgen.filesystem.filetype import file_type_for, is_binary_file
from ctxgen.filesystem.models import Entry, ScanOptions, SortKey
from ctxgen.filesystem.patterns import PatternSet

logger = logging.getLogger(__name__)

# (processed, total, current_path)
ProgressCallback = Callable[[int, int, str], None]

DIRECTORY_TYPE = "directory"


class CancellationToken:
    """Cooperative cancellation signal shared between a caller and a walk.

    The walker polls the token between directory visits and between files;
    in-flight filesystem calls are never interrupted.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        """True once cancellation was requested."""
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise ScanCancelledError if cancellation was requested."""
        if self._event.is_set():
            raise ScanCancelledError()


@dataclass(frozen=True, slots=True)
class Selection:
    """Entries selected by one walk.

    Attributes:
        files: File entries in result order.
        folders: Folder entries in result order.
        skipped: Entries that could not be read and were skipped.
    """

    files: tuple[Entry, ...]
    folders: tuple[Entry, ...]
    skipped: int = 0


class DirectoryWalker:
    """Selects files and folders beneath a root directory.

    A walker instance performs exactly one walk; create a new one for
    every scan.

    Args:
        root: Directory to walk.
        options: Filter configuration for the walk.
        cancel: Optional cancellation token polled during the walk.
        on_progress: Optional callback receiving (processed, total, current_path).
    """

    def __init__(
        self,
        root: str | Path,
        options: ScanOptions,
        *,
        cancel: CancellationToken | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._root = os.path.abspath(os.fspath(root))
        self._options = options
        self._cancel = cancel
        self._on_progress = on_progress

        self._include = PatternSet(options.include_patterns)
        self._exclude = PatternSet(options.exclude_patterns)
        self._max_size = options.max_file_size_bytes

        self._files: list[Entry] = []
        self._folders: list[Entry] = []
        self._seen_files: set[str] = set()
        self._seen_folders: set[str] = set()
        self._skipped = 0
        self._processed = 0
        self._total = 0

    def walk(self) -> Selection:
        """Run the walk and return the sorted selection.

        Returns:
            Selection with files and folders sorted by ``options.sort_by``.

        Raises:
            RootUnreadableError: If the root cannot be listed.
            ScanCancelledError: If the cancellation token was set.
        """
        selecting = bool(self._options.selected_paths)
        children = self._list_root(count=not selecting)

        if selecting:
            self._walk_selected()
        else:
            self._walk_from(children, "")

        self._report("")
        logger.info(
            "Walked %s: %d files, %d folders, %d skipped",
            self._root,
            len(self._files),
            len(self._folders),
            self._skipped,
        )
        sort_by = self._options.sort_by
        return Selection(
            files=tuple(sort_entries(self._files, sort_by)),
            folders=tuple(sort_entries(self._folders, sort_by)),
            skipped=self._skipped,
        )

    # === Walk ===

    def _list_root(self, *, count: bool = True) -> list[os.DirEntry[str]]:
        """List the root directory, converting failures to RootUnreadableError.

        With ``count`` unset the root is only checked for readability and its
        files are not added to the progress total.
        """
        try:
            with os.scandir(self._root) as it:
                children = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise RootUnreadableError(self._root, e.strerror or str(e)) from e
        if count:
            self._count_files(children)
        return children

    def _walk_from(self, children: list[os.DirEntry[str]], rel_dir: str) -> None:
        """Depth-first walk starting from already listed children of ``rel_dir``."""
        stack: list[tuple[Iterator[os.DirEntry[str]], str]] = [(iter(children), rel_dir)]

        while stack:
            self._check_cancel()
            iterator, parent_rel = stack[-1]
            child = next(iterator, None)
            if child is None:
                stack.pop()
                continue

            rel = f"{parent_rel}/{child.name}" if parent_rel else child.name
            if self._is_directory(child):
                if self._visit_directory(child, rel):
                    listed = self._list_directory(child.path)
                    if listed is not None:
                        stack.append((iter(listed), rel))
            else:
                self._visit_file(child.path, child.name, rel, child)

    def _walk_selected(self) -> None:
        """Walk only the explicitly selected paths."""
        for raw in self._options.selected_paths:
            self._check_cancel()
            path = os.path.abspath(raw)
            rel = self._relative(path)
            try:
                st = os.stat(path)
            except OSError as e:
                self._skip(EntryUnreadableError(path, e.strerror or str(e)))
                continue

            if stat.S_ISDIR(st.st_mode):
                if path in self._seen_folders:
                    continue
                self._seen_folders.add(path)
                self._folders.append(_make_entry(path, rel, st, is_directory=True))
                listed = self._list_directory(path)
                if listed is not None:
                    self._walk_from(listed, rel)
            elif path not in self._seen_files:
                self._total += 1
                self._processed += 1
                self._seen_files.add(path)
                self._files.append(_make_entry(path, rel, st, is_directory=False))
                self._report(path)

    def _list_directory(self, path: str) -> list[os.DirEntry[str]] | None:
        """List a directory below the root; None if it cannot be read."""
        try:
            with os.scandir(path) as it:
                children = sorted(it, key=lambda e: e.name)
        except OSError as e:
            self._skip(EntryUnreadableError(path, e.strerror or str(e)))
            return None
        self._count_files(children)
        return children

    # === Rules ===

    def _visit_directory(self, child: os.DirEntry[str], rel: str) -> bool:
        """Apply folder rules to a directory.

        Returns:
            True if the walk should descend into the directory.
        """
        name = child.name
        if child.path in self._seen_folders:
            return False
        if self._beyond_depth(rel):
            return False
        if not self._options.show_hidden and name.startswith("."):
            return False
        if self._exclude.prunes(name, rel):
            return False
        self._seen_folders.add(child.path)

        if self._folder_selected(name, rel):
            try:
                st = child.stat(follow_symlinks=self._options.follow_symlinks)
            except OSError as e:
                self._skip(EntryUnreadableError(child.path, e.strerror or str(e)))
                return False
            self._folders.append(_make_entry(child.path, rel, st, is_directory=True))

        return self._options.recursive

    def _folder_selected(self, name: str, rel: str) -> bool:
        if self._include and not self._include.matches(name, rel, is_directory=True):
            return False
        return not self._exclude.matches(name, rel, is_directory=True)

    def _visit_file(
        self,
        path: str,
        name: str,
        rel: str,
        child: os.DirEntry[str],
    ) -> None:
        """Apply file rules in order: depth, hidden, include, exclude, size, binary."""
        self._processed += 1
        self._report(path)

        if self._beyond_depth(rel):
            return
        if not self._options.show_hidden and name.startswith("."):
            return
        if self._include and not self._include.matches(name, rel, is_directory=False):
            return
        if self._exclude.matches(name, rel, is_directory=False):
            return
        if path in self._seen_files:
            return

        try:
            # Symlinks are always resolved for files so dead links surface here
            st = child.stat(follow_symlinks=True)
        except OSError as e:
            self._skip(EntryUnreadableError(path, e.strerror or str(e)))
            return

        if self._max_size > 0 and st.st_size > self._max_size:
            return
        if self._options.exclude_binary and is_binary_file(path):
            return

        self._seen_files.add(path)
        self._files.append(_make_entry(path, rel, st, is_directory=False))

    def _beyond_depth(self, rel: str) -> bool:
        max_depth = self._options.max_depth
        return max_depth > 0 and rel.count("/") >= max_depth

    def _is_directory(self, child: os.DirEntry[str]) -> bool:
        """Classify a child; symlinked directories count only when following links."""
        try:
            if child.is_symlink() and not self._options.follow_symlinks:
                return False
            return child.is_dir(follow_symlinks=True)
        except OSError:
            return False

    # === Bookkeeping ===

    def _count_files(self, children: Iterable[os.DirEntry[str]]) -> None:
        self._total += sum(1 for child in children if not self._is_directory(child))
        self._report("")

    def _relative(self, path: str) -> str:
        """POSIX path of ``path`` relative to the root; basename if outside it."""
        try:
            rel = os.path.relpath(path, self._root)
        except ValueError:
            return os.path.basename(path)
        if rel == os.curdir:
            return ""
        if rel.startswith(os.pardir):
            return os.path.basename(path)
        return Path(rel).as_posix()

    def _skip(self, error: EntryUnreadableError) -> None:
        self._skipped += 1
        logger.debug("Skipping entry: %s", error)

    def _report(self, current_path: str) -> None:
        if self._on_progress is not None:
            self._on_progress(self._processed, self._total, current_path)

    def _check_cancel(self) -> None:
        if self._cancel is not None:
            self._cancel.raise_if_cancelled()


def _make_entry(path: str, rel: str, st: os.stat_result, *, is_directory: bool) -> Entry:
    """Build an Entry from stat data."""
    name = os.path.basename(path.rstrip(os.sep)) or path
    return Entry(
        path=path,
        relative_path=rel or name,
        name=name,
        size=0 if is_directory else st.st_size,
        modified_at=datetime.fromtimestamp(st.st_mtime, tz=UTC),
        is_directory=is_directory,
        is_hidden=name.startswith("."),
        file_type=DIRECTORY_TYPE if is_directory else file_type_for(name),
        depth=rel.count("/") if rel else 0,
    )


def select_entries(
    root: str | Path,
    options: ScanOptions,
    *,
    cancel: CancellationToken | None = None,
    on_progress: ProgressCallback | None = None,
) -> Selection:
    """Walk ``root`` and return the selected files and folders.

    Args:
        root: Directory to walk.
        options: Filter configuration.
        cancel: Optional cancellation token.
        on_progress: Optional progress callback (processed, total, current_path).

    Returns:
        Selection of sorted file and folder entries.

    Raises:
        RootUnreadableError: If the root cannot be listed.
        InvalidSizeLimitError: If the configured size limit is malformed.
        ScanCancelledError: If the walk was cancelled.
    """
    walker = DirectoryWalker(root, options, cancel=cancel, on_progress=on_progress)
    return walker.walk()


def sort_entries(entries: Iterable[Entry], key: SortKey | str) -> list[Entry]:
    """Sort entries by name, size or modification time.

    Sorting is stable. ``size`` and ``modified`` re-read metadata from the
    filesystem; any pair where either side cannot be read is compared by
    name instead. Unknown keys sort by name.

    Args:
        entries: Entries to sort.
        key: Sort key or its name.

    Returns:
        New sorted list.
    """
    sort_key = SortKey.parse(key)
    items = list(entries)
    if sort_key is SortKey.NAME:
        return sorted(items, key=lambda e: e.relative_path)

    stats: dict[str, os.stat_result | None] = {}
    for entry in items:
        try:
            stats[entry.path] = os.stat(entry.path)
        except OSError:
            stats[entry.path] = None

    def compare(a: Entry, b: Entry) -> int:
        sa, sb = stats[a.path], stats[b.path]
        if sa is None or sb is None:
            return _cmp(a.relative_path, b.relative_path)
        if sort_key is SortKey.SIZE:
            return _cmp(sa.st_size, sb.st_size)
        return _cmp(sa.st_mtime, sb.st_mtime)

    return sorted(items, key=cmp_to_key(compare))


def _cmp(a: object, b: object) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def list_directory(path: str | Path, show_hidden: bool = False) -> list[Entry]:
    """List the immediate children of a directory for interactive browsing.

    Directories come first, then files, each group ordered by name.
    Children that cannot be stat'ed are skipped.

    Args:
        path: Directory to list.
        show_hidden: Include entries whose basename starts with ".".

    Returns:
        Entries for the directory's children.

    Raises:
        RootUnreadableError: If the directory cannot be listed.
    """
    directory = os.path.abspath(os.fspath(path))
    try:
        with os.scandir(directory) as it:
            children = list(it)
    except OSError as e:
        raise RootUnreadableError(directory, e.strerror or str(e)) from e

    entries: list[Entry] = []
    for child in children:
        if not show_hidden and child.name.startswith("."):
            continue
        try:
            st = child.stat()
        except OSError:
            logger.debug("Cannot stat %s while listing %s", child.path, directory)
            continue
        entries.append(
            _make_entry(child.path, child.name, st, is_directory=stat.S_ISDIR(st.st_mode))
        )

    entries.sort(key=lambda e: (not e.is_directory, e.name))
    return entries
