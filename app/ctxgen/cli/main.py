"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from ctxgen import __version__
from ctxgen.cli.commands import config, scan, tui
from ctxgen.core.logs import configure_logging

# Create main Typer app
app = typer.Typer(
    name="ctxgen",
    help="Scan directory trees into file manifests.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"ctxgen version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """ctxgen - Scan directory trees into file manifests.

    Select files with depth, visibility, size and pattern rules, either
    from the command line or in an interactive terminal session.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    configure_logging(verbose=verbose, quiet=quiet)


# Register commands
app.command(name="scan")(scan.scan)
app.command(name="tui")(tui.tui)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
