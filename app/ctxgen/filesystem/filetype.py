"""File type derivation and binary content detection."""

import codecs
import logging
from pathlib import PurePath

logger = logging.getLogger(__name__)

UNKNOWN_TYPE = "unknown"

# Extensions always treated as text without reading the file
TEXT_EXTENSIONS: frozenset[str] = frozenset(
    {
        "txt", "md", "rst", "json", "xml", "yaml", "yml", "toml", "ini", "cfg",
        "go", "py", "pyi", "js", "ts", "tsx", "jsx", "java", "kt", "scala",
        "c", "h", "cpp", "hpp", "cs", "rs", "swift", "rb", "php", "lua",
        "html", "css", "scss", "sass", "sql", "sh", "bash", "zsh", "bat", "ps1",
        "csv", "tsv",
    }
)  # fmt: skip

_SNIFF_BYTES = 512
_PRINTABLE_RATIO = 0.8


def file_type_for(name: str) -> str:
    """Derive a file type from a basename's extension.

    Dotfiles such as ``.gitignore`` have no extension.

    Args:
        name: Basename of the file.

    Returns:
        Lower-case extension without the dot, or "unknown".
    """
    suffix = PurePath(name).suffix
    if not suffix or suffix == name:
        return UNKNOWN_TYPE
    return suffix[1:].lower()


def is_binary_file(path: str) -> bool:
    """Heuristically decide whether a file holds binary content.

    Files with a known text extension are text. Otherwise the first 512
    bytes are sampled: a NUL byte means binary, valid UTF-8 means text,
    and anything else is binary unless more than 80% of it is printable
    ASCII or whitespace. Unreadable files count as binary.

    Args:
        path: Path of the file to inspect.

    Returns:
        True if the file looks binary.
    """
    if file_type_for(PurePath(path).name) in TEXT_EXTENSIONS:
        return False

    try:
        with open(path, "rb") as f:
            sample = f.read(_SNIFF_BYTES)
    except OSError as e:
        logger.debug("Cannot sample %s for binary detection: %s", path, e)
        return True

    if not sample:
        return False
    if b"\x00" in sample:
        return True

    try:
        # final=False tolerates a multi-byte character cut off by the sample
        codecs.getincrementaldecoder("utf-8")().decode(sample, final=False)
    except UnicodeDecodeError:
        pass
    else:
        return False

    printable = sum(1 for b in sample if 32 <= b <= 126 or b in (9, 10, 13))
    return printable / len(sample) <= _PRINTABLE_RATIO
