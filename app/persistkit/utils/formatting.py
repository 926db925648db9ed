"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from persistkit.mapping.loader import short_name

if TYPE_CHECKING:
    from persistkit.mapping.metadata import ClassMetadata


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances
console = Console(color_system=_detect_color_system())
err_console = Console(stderr=True, color_system=_detect_color_system())


def create_class_table(title: str = "Mapped Classes") -> Table:
    """Create a pre-configured table for displaying mapped classes.

    Args:
        title: Table title.

    Returns:
        Rich Table with module and class columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold cyan",
        border_style="blue",
        row_styles=["", "on grey7"],  # Zebra striping for readability
    )
    table.add_column("Class", style="bold green", no_wrap=True)
    table.add_column("Module", style="dim")
    return table


def format_class_row(class_name: str) -> tuple[str, str]:
    """Split a class identifier into (class, module) display columns.

    The root namespace package is left out of the module column.
    """
    module, _, name = short_name(class_name).rpartition(".")
    return (escape(name), escape(module) or "-")


def create_metadata_table(metadata: ClassMetadata) -> Table:
    """Create a two-column table describing class metadata.

    Args:
        metadata: Populated class metadata.

    Returns:
        Rich Table with one row per metadata attribute.
    """
    table = Table(title=escape(metadata.name), show_header=False, border_style="blue")
    table.add_column("Field", style="bold cyan", no_wrap=True)
    table.add_column("Value")

    kind = "mapped superclass" if metadata.is_mapped_superclass else "entity"
    table.add_row("Kind", kind)
    table.add_row("Table", escape(metadata.table_name or "-"))
    table.add_row("Repository", escape(metadata.repository_class or "-"))
    table.add_row("Parents", "\n".join(escape(p) for p in metadata.parent_classes) or "-")
    table.add_row("Annotations", "\n".join(escape(repr(a)) for a in metadata.annotations) or "-")
    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[cyan]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[yellow]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[bold red]Error:[/] {escape(message)}")
