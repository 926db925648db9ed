"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from persistkit import __version__
from persistkit.cli.commands import mapping
from persistkit.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="persistkit",
    help="Persistence mapping tools.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"persistkit version {__version__}")
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
            help="Log scan details to stderr.",
        ),
    ] = False,
) -> None:
    """persistkit - persistence mapping tools.

    Discover annotated classes and inspect their mapping metadata.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


# Register commands
app.add_typer(mapping.app, name="mapping")


if __name__ == "__main__":
    app()
