"""Interactive session command."""

import sys
from typing import Annotated

import typer

from ctxgen.core.config import load_settings_or_default
from ctxgen.core.logs import configure_file_logging
from ctxgen.filesystem.sizes import format_size
from ctxgen.tui.app import SessionApp
from ctxgen.utils.formatting import print_error, print_info, print_success


def tui(
    ctx: typer.Context,
    path: Annotated[
        str,
        typer.Argument(help="Initial root directory."),
    ] = ".",
) -> None:
    """Start the interactive scanner.

    Logs are written to ~/.local/state/ctxgen/ctxgen.log while the
    session owns the screen.
    """
    if not sys.stdin.isatty() or not sys.stdout.isatty():
        print_error("The interactive session needs a terminal.")
        raise typer.Exit(code=1)

    obj = ctx.obj or {}
    try:
        log_path = configure_file_logging(verbose=obj.get("verbose", False))
    except RuntimeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    settings = load_settings_or_default()
    result = SessionApp(root_path=path, options=settings.to_scan_options()).run()

    if result is not None:
        print_success(
            f"Last scan: {result.file_count} files, {result.folder_count} folders, "
            f"{format_size(result.total_size_bytes)}"
        )
    if obj.get("verbose"):
        print_info(f"Session log: {log_path}")
