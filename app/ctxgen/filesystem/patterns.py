"""Glob pattern matching against entry basenames.

Matching is case-sensitive and uses fnmatch glob syntax (``*``, ``?``,
``[seq]``, ``[!seq]``). A pattern that cannot be parsed never matches
anything; it is reported once through the logger and never aborts a scan.

Two pattern forms extend plain basename globs:

- A trailing ``/`` (``node_modules/``) restricts the pattern to directories.
- A ``/`` inside the pattern (``docs/*.md``) matches the root-relative path.
"""

import fnmatch
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache

from ctxgen.filesystem.errors import InvalidPatternError

logger = logging.getLogger(__name__)


def is_valid_pattern(pattern: str) -> bool:
    """Check whether a glob pattern can be parsed.

    A pattern is unparseable when a ``[`` character class is never closed
    or when it ends with a dangling backslash escape.

    Args:
        pattern: Glob pattern to check.

    Returns:
        True if the pattern is well formed.
    """
    if not pattern:
        return False
    i = 0
    n = len(pattern)
    while i < n:
        char = pattern[i]
        if char == "\\":
            if i + 1 >= n:
                return False
            i += 2
            continue
        if char == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            # A leading "]" is a literal member of the class
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                return False
            i = j + 1
            continue
        i += 1
    return True


@lru_cache(maxsize=512)
def _compile(pattern: str) -> re.Pattern[str] | None:
    """Compile a glob to a regex, or None if the glob is invalid."""
    if not is_valid_pattern(pattern):
        logger.warning("%s; treating it as never matching", InvalidPatternError(pattern))
        return None
    return re.compile(fnmatch.translate(pattern))


def _glob_match(pattern: str, name: str) -> bool:
    compiled = _compile(pattern)
    return compiled is not None and compiled.match(name) is not None


def matches(patterns: Iterable[str], name: str) -> bool:
    """Return True if ``name`` glob-matches any pattern.

    An empty pattern set matches nothing; callers decide whether that
    means "no restriction" (include sets) or "nothing excluded" (exclude sets).

    Args:
        patterns: Glob patterns to try, in order.
        name: Basename to test.

    Returns:
        True on the first matching pattern.
    """
    return any(_glob_match(pattern, name) for pattern in patterns)


def matches_fuzzy(patterns: Iterable[str], name: str) -> bool:
    """Return True if ``name`` glob-matches or contains any pattern.

    Only meant for informal filtering (e.g. the interactive browser),
    never for exclusion rules.
    """
    for pattern in patterns:
        if not pattern:
            continue
        if _glob_match(pattern, name) or pattern in name:
            return True
    return False


@dataclass(frozen=True, slots=True)
class PatternSet:
    """An ordered set of patterns applied to traversal entries.

    Attributes:
        patterns: Glob patterns in configuration order.
    """

    patterns: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def matches(self, name: str, relative_path: str, *, is_directory: bool) -> bool:
        """Check an entry against the set.

        Args:
            name: Entry basename.
            relative_path: POSIX path relative to the scan root.
            is_directory: Whether the entry is a directory.

        Returns:
            True if any pattern applies to the entry.
        """
        for pattern in self.patterns:
            directory_only = len(pattern) > 1 and pattern.endswith("/")
            glob = pattern.rstrip("/") if directory_only else pattern
            if directory_only and not is_directory:
                continue
            target = relative_path if "/" in glob else name
            if _glob_match(glob, target):
                return True
        return False

    def prunes(self, name: str, relative_path: str) -> bool:
        """Return True if a directory-only pattern excludes this directory's subtree."""
        for pattern in self.patterns:
            if len(pattern) > 1 and pattern.endswith("/"):
                glob = pattern.rstrip("/")
                target = relative_path if "/" in glob else name
                if _glob_match(glob, target):
                    return True
        return False
