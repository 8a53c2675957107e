"""Manifest export for scan results.

A manifest is the serialized form of a ScanResult: metadata about the
scan, a summary with counts and the total size, and the selected files
and folders. JSON and TOML carry ``ScanResult.to_dict()`` as is; Markdown
and XML lay the same data out for reading and for other tools.
"""

import json
import logging
import os
import xml.etree.ElementTree as ET
from enum import Enum
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w

from ctxgen.filesystem.models import ScanResult
from ctxgen.filesystem.sizes import format_size

logger = logging.getLogger(__name__)

MANIFEST_PREFIX = "ctxgen-manifest-"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


class ManifestFormat(str, Enum):
    """Serialization format of an exported manifest."""

    JSON = "json"
    TOML = "toml"
    MARKDOWN = "markdown"
    XML = "xml"

    @classmethod
    def from_path(cls, path: Path) -> "ManifestFormat":
        """Guess the format from a file suffix, defaulting to JSON."""
        return _SUFFIXES.get(path.suffix.lower(), cls.JSON)


_SUFFIXES: dict[str, ManifestFormat] = {
    ".json": ManifestFormat.JSON,
    ".toml": ManifestFormat.TOML,
    ".md": ManifestFormat.MARKDOWN,
    ".markdown": ManifestFormat.MARKDOWN,
    ".xml": ManifestFormat.XML,
}


class ManifestError(Exception):
    """Raised when a manifest cannot be written."""


def _md_cell(value: object) -> str:
    return str(value).replace("|", "\\|")


def _render_markdown(data: dict[str, Any]) -> str:
    metadata = data["metadata"]
    summary = data["summary"]
    lines = [
        "# Code context",
        "",
        f"- **Root**: `{metadata['root_path']}`",
        f"- **Scanned at**: {metadata['finished_at']}",
        f"- **Files**: {summary['file_count']}",
        f"- **Folders**: {summary['folder_count']}",
        f"- **Total size**: {format_size(summary['total_size_bytes'])}"
        f" ({summary['total_size_bytes']} bytes)",
        "",
    ]

    if data["folders"]:
        lines += ["## Folders", ""]
        lines += [f"- `{folder['relative_path']}`" for folder in data["folders"]]
        lines.append("")

    if data["files"]:
        lines += [
            "## Files",
            "",
            "| Path | Type | Size | Modified |",
            "|---|---|---:|---|",
        ]
        for entry in data["files"]:
            row = (
                _md_cell(entry["relative_path"]),
                _md_cell(entry["file_type"]),
                format_size(entry["size"]),
                entry["modified_at"],
            )
            lines.append("| " + " | ".join(row) + " |")
        lines.append("")

    return "\n".join(lines)


def _xml_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _xml_fields(parent: ET.Element, fields: dict[str, Any]) -> None:
    for key, value in fields.items():
        ET.SubElement(parent, key).text = _xml_text(value)


def _render_xml(data: dict[str, Any]) -> str:
    root = ET.Element("context")
    _xml_fields(ET.SubElement(root, "metadata"), data["metadata"])
    _xml_fields(ET.SubElement(root, "summary"), data["summary"])
    for group, tag in (("files", "file"), ("folders", "folder")):
        container = ET.SubElement(root, group)
        for entry in data[group]:
            _xml_fields(ET.SubElement(container, tag), entry)

    ET.indent(root)
    return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"


def render_manifest(result: ScanResult, fmt: ManifestFormat = ManifestFormat.JSON) -> str:
    """Serialize a scan result.

    Args:
        result: Scan result to serialize.
        fmt: Output format.

    Returns:
        Manifest text.
    """
    data = result.to_dict()
    if fmt == ManifestFormat.TOML:
        return tomli_w.dumps(data)
    if fmt == ManifestFormat.MARKDOWN:
        return _render_markdown(data)
    if fmt == ManifestFormat.XML:
        return _render_xml(data)
    return json.dumps(data, indent=2, ensure_ascii=False)


def export_manifest(
    result: ScanResult,
    path: Path,
    fmt: ManifestFormat | None = None,
) -> Path:
    """Write a scan result manifest to disk.

    The file is written to a temporary file next to the target and moved
    into place with os.replace().

    Args:
        result: Scan result to export.
        path: Target file path.
        fmt: Output format. If None, derived from the file suffix.

    Returns:
        Path of the written manifest.

    Raises:
        ManifestError: If the target is a directory or cannot be written.
    """
    if path.is_dir():
        msg = f"Export path is a directory: {path}"
        raise ManifestError(msg)

    content = render_manifest(result, fmt or ManifestFormat.from_path(path))

    tmp_path: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            f.write(content)
        os.replace(str(tmp_path), str(path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        msg = f"Failed to write manifest {path}: {e}"
        raise ManifestError(msg) from e

    logger.info("Exported manifest with %d files to %s", result.file_count, path)
    return path


def default_export_path(result: ScanResult) -> Path:
    """Default manifest location for an interactive export.

    The name starts with MANIFEST_PREFIX, which the default exclude
    patterns skip, so rescanning the root does not pick the manifest up.

    Returns:
        ``ctxgen-manifest-<timestamp>.json`` inside the scanned root.
    """
    stamp = result.finished_at.strftime("%Y%m%d-%H%M%S")
    return Path(result.root_path) / f"{MANIFEST_PREFIX}{stamp}.json"
