"""Logging setup for ctxgen.

Command-line runs log to stderr through Rich; the interactive session owns
the whole screen, so it logs to a file under the XDG state directory.
"""

import logging
from pathlib import Path

from rich.logging import RichHandler

from ctxgen.core.paths import ensure_state_dir, get_log_path
from ctxgen.utils.formatting import err_console

LOGGER_NAME = "ctxgen"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(threadName)s %(name)s: %(message)s"


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Send ctxgen log records to stderr.

    Args:
        verbose: Log at DEBUG level.
        quiet: Only log errors.

    Returns:
        The configured package logger.
    """
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logger = logging.getLogger(LOGGER_NAME)
    _reset(logger)
    logger.setLevel(level)

    handler = RichHandler(
        console=err_console,
        level=level,
        show_path=verbose,
        rich_tracebacks=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def configure_file_logging(verbose: bool = False, path: Path | None = None) -> Path:
    """Send ctxgen log records to the session log file.

    Args:
        verbose: Log at DEBUG level instead of INFO.
        path: Log file path. If None, uses ~/.local/state/ctxgen/ctxgen.log.

    Returns:
        Path of the log file.

    Raises:
        RuntimeError: If the state directory cannot be created.
    """
    if path is None:
        ensure_state_dir()
        path = get_log_path()
    else:
        path.parent.mkdir(parents=True, exist_ok=True)

    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    _reset(logger)
    logger.setLevel(level)

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    logger.addHandler(handler)
    return path
