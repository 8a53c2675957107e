"""Scan command implementation.

Walks a directory with the configured rules and prints or exports the
selected files.
"""

from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from ctxgen.core.config import Settings, load_settings_or_default
from ctxgen.core.manifest import ManifestError, ManifestFormat, export_manifest, render_manifest
from ctxgen.filesystem.errors import ScanError
from ctxgen.filesystem.models import ScanResult, SortKey
from ctxgen.filesystem.sizes import format_size
from ctxgen.scan.coordinator import run_scan
from ctxgen.utils.formatting import (
    console,
    create_entry_table,
    err_console,
    format_entry_row,
    print_error,
    print_info,
)


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"
    TOML = "toml"
    MARKDOWN = "markdown"
    XML = "xml"


def _build_overrides(
    max_depth: int | None,
    max_size: str | None,
    hidden: bool | None,
    follow_symlinks: bool | None,
    exclude_binary: bool | None,
    recursive: bool | None,
    sort: SortKey | None,
) -> dict[str, Any]:
    """Collect the command line options that were actually given."""
    overrides: dict[str, Any] = {
        "max_depth": max_depth,
        "max_file_size": max_size,
        "show_hidden": hidden,
        "follow_symlinks": follow_symlinks,
        "exclude_binary": exclude_binary,
        "recursive": recursive,
        "sort_by": sort,
    }
    return {key: value for key, value in overrides.items() if value is not None}


def _print_table(result: ScanResult, limit: int | None) -> None:
    """Print the selected files as a table followed by a summary."""
    files = result.files[:limit] if limit else result.files

    if files:
        table = create_entry_table(f"Selected files in {result.root_path}")
        for entry in files:
            table.add_row(*format_entry_row(entry))
        console.print(table)
    else:
        print_info("No files matched.")

    console.print(
        f"\n[dim]{result.file_count} files, {result.folder_count} folders, "
        f"{format_size(result.total_size_bytes)} total ({result.duration:.2f}s)[/dim]"
    )
    if limit and len(files) < result.file_count:
        console.print(
            f"[dim](showing {len(files)} of {result.file_count}, limited to {limit})[/dim]"
        )


def scan(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="Directory to scan."),
    ] = Path("."),
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-d", min=0, help="Maximum depth (0 = unlimited)."),
    ] = None,
    max_size: Annotated[
        str | None,
        typer.Option("--max-size", "-s", help="Skip files larger than this (e.g. 500KB, 10MB)."),
    ] = None,
    include: Annotated[
        list[str] | None,
        typer.Option("--include", "-i", help="Only keep files matching this glob (repeatable)."),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", "-x", help="Skip entries matching this glob (repeatable)."),
    ] = None,
    hidden: Annotated[
        bool | None,
        typer.Option("--hidden/--no-hidden", help="Include dot files and folders."),
    ] = None,
    follow_symlinks: Annotated[
        bool | None,
        typer.Option("--follow-symlinks/--no-follow-symlinks", help="Follow symbolic links."),
    ] = None,
    exclude_binary: Annotated[
        bool | None,
        typer.Option("--exclude-binary/--include-binary", help="Skip binary files."),
    ] = None,
    recursive: Annotated[
        bool | None,
        typer.Option("--recursive/--no-recursive", help="Descend into subdirectories."),
    ] = None,
    sort: Annotated[
        SortKey | None,
        typer.Option("--sort", help="Sort by name, size or modified.", case_sensitive=False),
    ] = None,
    no_config: Annotated[
        bool,
        typer.Option("--no-config", help="Ignore settings.toml and use built-in defaults."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table, json, toml, markdown or xml.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    export_path: Annotated[
        Path | None,
        typer.Option(
            "--export", "-e", help="Export the manifest; the suffix picks json, toml, md or xml."
        ),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-l", min=1, help="Limit number of files to display."),
    ] = None,
) -> None:
    """Scan a directory and list the selected files.

    Options default to ~/.config/ctxgen/settings.toml when it exists.
    Patterns given on the command line are added to the configured ones.

    Examples:
        ctxgen scan                          # Scan the current directory
        ctxgen scan src -i "*.py"            # Only Python files under src
        ctxgen scan . -d 2 --hidden          # Two levels, dot files included
        ctxgen scan . --max-size 1MB         # Skip files over 1 MiB
        ctxgen scan . --export manifest.json # Write a manifest
        ctxgen scan . --format markdown      # Print a Markdown manifest
    """
    obj = ctx.obj or {}
    settings = Settings() if no_config else load_settings_or_default()

    overrides = _build_overrides(
        max_depth, max_size, hidden, follow_symlinks, exclude_binary, recursive, sort
    )
    if include:
        overrides["include_patterns"] = (*settings.include_patterns, *include)
    if exclude:
        overrides["exclude_patterns"] = (*settings.exclude_patterns, *exclude)
    options = settings.to_scan_options(**overrides)

    show_progress = not obj.get("quiet") and output_format == OutputFormat.TABLE
    with Progress(
        SpinnerColumn(),
        TextColumn("[info]Scanning[/]"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=err_console,
        transient=True,
        disable=not show_progress,
    ) as progress:
        task = progress.add_task("scan", total=None)

        def on_progress(processed: int, total: int, current_path: str) -> None:
            progress.update(task, completed=processed, total=total or None)

        try:
            result = run_scan(path, options, on_progress=on_progress)
        except ScanError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    if export_path is not None:
        try:
            written = export_manifest(result, export_path.resolve())
        except ManifestError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
        if not obj.get("quiet") and output_format == OutputFormat.TABLE:
            print_info(f"Manifest exported to {written}")

    if output_format != OutputFormat.TABLE:
        typer.echo(render_manifest(result, ManifestFormat(output_format.value)))
        return

    _print_table(result, limit)
