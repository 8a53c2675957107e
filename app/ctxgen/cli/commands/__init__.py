"""CLI commands for ctxgen.

This package contains all subcommand implementations.
"""

from ctxgen.cli.commands import config, scan, tui

__all__ = ["config", "scan", "tui"]
