"""Directory path completion for the root path input."""

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


def suggest_paths(prefix: str, limit: int = DEFAULT_LIMIT) -> list[str]:
    """Suggest directories that complete a partially typed path.

    The directory part of ``prefix`` is kept as typed (including ``~``);
    completions are matched on the last component, case-sensitively.
    Hidden directories are offered only when the typed component starts
    with ".".

    Args:
        prefix: Partially typed path.
        limit: Maximum number of suggestions.

    Returns:
        Sorted completions, each ending with a path separator.
    """
    if not prefix or limit <= 0:
        return []

    head, tail = os.path.split(prefix)
    directory = os.path.expanduser(head) if head else os.curdir

    try:
        with os.scandir(directory) as it:
            names = sorted(
                entry.name
                for entry in it
                if entry.name.startswith(tail)
                and (tail.startswith(".") or not entry.name.startswith("."))
                and _is_dir(entry)
            )
    except OSError as e:
        logger.debug("No completions for %r: %s", prefix, e)
        return []

    return [os.path.join(head, name) + os.sep for name in names[:limit]]


def _is_dir(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_dir()
    except OSError:
        return False
