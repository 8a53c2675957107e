"""Utility modules for ctxgen.

This module exports commonly used console helpers.
"""

from ctxgen.utils.formatting import (
    console,
    create_entry_table,
    err_console,
    format_entry_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_entry_table",
    "err_console",
    "format_entry_row",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
