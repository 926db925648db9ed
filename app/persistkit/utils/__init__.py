"""Utility modules for persistkit.

This module exports commonly used utility functions.
"""

from persistkit.utils.formatting import (
    console,
    create_class_table,
    create_metadata_table,
    err_console,
    print_error,
    print_info,
    print_warning,
)

__all__ = [
    "console",
    "create_class_table",
    "create_metadata_table",
    "err_console",
    "print_error",
    "print_info",
    "print_warning",
]
