"""Byte size parsing and formatting."""

import re

from ctxgen.filesystem.errors import InvalidSizeLimitError

_UNITS: dict[str, int] = {
    "": 1,
    "B": 1,
    "K": 1024,
    "KB": 1024,
    "M": 1024**2,
    "MB": 1024**2,
    "G": 1024**3,
    "GB": 1024**3,
}

_SIZE_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*([A-Z]*)$")


def parse_size(value: int | str) -> int:
    """Parse a size limit into a byte count.

    Accepts plain integers or strings such as ``"512"``, ``"10KB"``,
    ``"1.5 M"`` or ``"2GB"`` (case-insensitive, binary multiples).

    Args:
        value: Integer byte count or size string.

    Returns:
        Size in bytes (0 means unlimited).

    Raises:
        InvalidSizeLimitError: If the value is negative or cannot be parsed.
    """
    if isinstance(value, bool):
        raise InvalidSizeLimitError(value)
    if isinstance(value, int):
        if value < 0:
            raise InvalidSizeLimitError(value)
        return value

    if not isinstance(value, str):
        raise InvalidSizeLimitError(value)

    match = _SIZE_RE.match(value.strip().upper())
    if match is None:
        raise InvalidSizeLimitError(value)

    number, unit = match.groups()
    multiplier = _UNITS.get(unit)
    if multiplier is None:
        raise InvalidSizeLimitError(value)

    return int(float(number) * multiplier)


def format_size(size_bytes: int | None) -> str:
    """Format byte count as human-readable string."""
    if size_bytes is None or size_bytes == 0:
        return "0 B"
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if abs(size) < 1024:
            return f"{size:.1f} {unit}" if unit != "B" else f"{int(size)} B"
        size /= 1024
    return f"{size:.1f} TB"
