"""Filesystem locations used by ctxgen.

Settings and the theme override live in the XDG config home, the session
log in the XDG state home:

- ~/.config/ctxgen/settings.toml
- ~/.config/ctxgen/theme.toml
- ~/.local/state/ctxgen/ctxgen.log
"""

import os
from pathlib import Path

APP_NAME = "ctxgen"


def _xdg_home(env_var: str, fallback: str) -> Path:
    """Application directory under an XDG base, honoring the override variable."""
    override = os.environ.get(env_var)
    base = Path(override) if override else Path.home() / fallback
    return base / APP_NAME


def get_config_dir() -> Path:
    """Directory holding settings.toml and theme.toml."""
    return _xdg_home("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Directory holding the interactive session log."""
    return _xdg_home("XDG_STATE_HOME", ".local/state")


def get_settings_path() -> Path:
    return get_config_dir() / "settings.toml"


def get_user_theme_path() -> Path:
    return get_config_dir() / "theme.toml"


def get_log_path() -> Path:
    return get_state_dir() / "ctxgen.log"


def ensure_state_dir() -> Path:
    """Create the state directory on first use.

    Returns:
        The state directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    state_dir = get_state_dir()
    try:
        state_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        msg = f"Cannot create state directory {state_dir}: {e.strerror or e}"
        raise RuntimeError(msg) from e
    return state_dir
