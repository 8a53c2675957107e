"""Settings commands.

Show, create and locate the settings file that seeds scan options.
"""

from typing import Annotated

import tomli_w
import typer

from ctxgen.core.config import (
    ConfigError,
    ConfigNotFoundError,
    Settings,
    load_settings,
    save_settings,
)
from ctxgen.core.paths import get_settings_path
from ctxgen.utils.formatting import print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Manage scan settings.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Print the effective settings as TOML."""
    try:
        settings = load_settings()
    except ConfigNotFoundError:
        print_info(f"No settings file at {get_settings_path()}; showing defaults.")
        settings = Settings()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    typer.echo(tomli_w.dumps(settings.model_dump(mode="json")))


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Create a settings file with the default options."""
    settings_path = get_settings_path()
    if settings_path.exists() and not force:
        print_warning(f"Settings already exist at {settings_path}. Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        written = save_settings(Settings(), settings_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Settings written to {written}")


@app.command()
def path() -> None:
    """Print the settings file location."""
    typer.echo(str(get_settings_path()))
