"""Scan settings persistence.

This module provides the settings model that seeds scan options for both
the command line and the interactive session, and the I/O functions that
read and write it.

Settings are stored in ~/.config/ctxgen/settings.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ctxgen.core.manifest import MANIFEST_PREFIX
from ctxgen.core.paths import get_settings_path
from ctxgen.filesystem.errors import InvalidSizeLimitError
from ctxgen.filesystem.models import ScanOptions, SortKey
from ctxgen.filesystem.sizes import parse_size

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "*.tmp",
    "*.log",
    "*.swp",
    "node_modules/",
    "target/",
    "dist/",
    "build/",
    ".env",
    ".git/",
    ".vscode/",
    ".idea/",
    "__pycache__/",
    "*.pyc",
    ".venv/",
    "*.class",
    f"{MANIFEST_PREFIX}*",
)


class Settings(BaseModel):
    """Persistent defaults for scan options.

    Attributes:
        max_depth: Depth cutoff (0 = unlimited).
        max_file_size: Byte count or size string such as "10MB" (0 = unlimited).
        include_patterns: Basename globs a file must match when non-empty.
        exclude_patterns: Basename globs that always reject an entry.
        follow_symlinks: Follow symbolic links.
        show_hidden: Include dot entries.
        exclude_binary: Skip files detected as binary.
        recursive: Descend into subdirectories.
        sort_by: Result ordering.
    """

    model_config = ConfigDict(extra="forbid")

    max_depth: Annotated[int, Field(ge=0, description="Depth cutoff (0 = unlimited)")] = 0
    max_file_size: Annotated[
        int | str,
        Field(description="Size limit in bytes or with a unit suffix (0 = unlimited)"),
    ] = 0
    include_patterns: list[str] = Field(default_factory=list)
    exclude_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    follow_symlinks: bool = False
    show_hidden: bool = False
    exclude_binary: bool = False
    recursive: bool = True
    sort_by: SortKey = SortKey.NAME

    @field_validator("max_file_size")
    @classmethod
    def validate_max_file_size(cls, v: int | str) -> int | str:
        """Reject size limits that cannot be parsed."""
        try:
            parse_size(v)
        except InvalidSizeLimitError as e:
            raise ValueError(str(e)) from None
        return v

    def to_scan_options(self, **overrides: object) -> ScanOptions:
        """Build scan options from these settings.

        Args:
            **overrides: ScanOptions fields that replace the stored values.

        Returns:
            ScanOptions seeded from the settings.
        """
        options = ScanOptions(
            max_depth=self.max_depth,
            max_file_size=self.max_file_size,
            include_patterns=tuple(self.include_patterns),
            exclude_patterns=tuple(self.exclude_patterns),
            follow_symlinks=self.follow_symlinks,
            show_hidden=self.show_hidden,
            exclude_binary=self.exclude_binary,
            recursive=self.recursive,
            sort_by=self.sort_by,
        )
        return options.with_changes(**overrides) if overrides else options

    @classmethod
    def from_scan_options(cls, options: ScanOptions) -> "Settings":
        """Capture the persistable part of scan options.

        Explicitly selected paths belong to one session and are not stored.
        """
        return cls(
            max_depth=options.max_depth,
            max_file_size=options.max_file_size,
            include_patterns=list(options.include_patterns),
            exclude_patterns=list(options.exclude_patterns),
            follow_symlinks=options.follow_symlinks,
            show_hidden=options.show_hidden,
            exclude_binary=options.exclude_binary,
            recursive=options.recursive,
            sort_by=options.sort_by,
        )


class ConfigError(Exception):
    """Base exception for settings errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the settings file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated Settings object.

    Raises:
        ConfigNotFoundError: If the settings file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        msg = f"Settings not found: {settings_path}"
        raise ConfigNotFoundError(msg)

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML syntax: {e}"
        raise ConfigParseError(msg) from e
    except OSError as e:
        msg = f"Failed to read settings: {e}"
        raise ConfigError(msg) from e

    try:
        return Settings.model_validate(data)
    except (ValueError, ValidationError) as e:
        msg = f"Invalid settings content: {e}"
        raise ConfigError(msg) from e


def load_settings_or_default(path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults when none are usable.

    A missing file is silent; a broken file is logged as a warning.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Loaded or default Settings.
    """
    try:
        return load_settings(path)
    except ConfigNotFoundError:
        return Settings()
    except ConfigError as e:
        logger.warning("Ignoring settings file: %s", e)
        return Settings()


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The Settings object to save.
        path: Path to save the settings. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    data = settings.model_dump(mode="json")

    tmp_path: Path | None = None
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        msg = f"Failed to write settings: {e}"
        raise ConfigError(msg) from e

    logger.debug("Saved settings to %s", settings_path)
    return settings_path
