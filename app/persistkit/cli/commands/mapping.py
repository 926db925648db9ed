"""Mapping commands.

Lists the mapped classes found under lookup directories and shows the
metadata loaded for a single class.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from persistkit.cli.types import OutputFormat, build_driver
from persistkit.core.config import MappingConfigError
from persistkit.exceptions import MappingError
from persistkit.mapping.loader import short_name
from persistkit.mapping.metadata import ClassMetadata
from persistkit.utils.formatting import (
    console,
    create_class_table,
    create_metadata_table,
    format_class_row,
    print_error,
    print_info,
)

app = typer.Typer(
    help="Inspect annotation mapping metadata.",
    invoke_without_command=True,
    no_args_is_help=True,
)

PathsArgument = Annotated[
    list[Path] | None,
    typer.Argument(help="Directories holding mapped classes."),
]
ExcludeOption = Annotated[
    list[Path] | None,
    typer.Option("--exclude", "-x", help="Directory to skip (repeatable)."),
]
ExtensionOption = Annotated[
    str | None,
    typer.Option("--extension", "-e", help="Mapping source file suffix (default: .py)."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Mapping config file (TOML)."),
]


@app.command("classes")
def list_classes(
    paths: PathsArgument = None,
    exclude: ExcludeOption = None,
    extension: ExtensionOption = None,
    config: ConfigOption = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """List all mapped classes under the lookup paths.

    Examples:
        persistkit mapping classes src/models
        persistkit mapping classes src/models -x src/models/legacy
        persistkit mapping classes --config mapping.toml --format json
    """
    try:
        driver = build_driver(paths, exclude, extension, config)
        class_names = driver.get_all_class_names()
    except (MappingConfigError, MappingError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps({"classes": class_names}))
        return

    if not class_names:
        print_info("No mapped classes found.")
        return

    table = create_class_table()
    for class_name in class_names:
        table.add_row(*format_class_row(class_name))
    console.print(table)
    print_info(f"{len(class_names)} mapped class(es)")


@app.command("show")
def show_class(
    class_name: Annotated[
        str,
        typer.Argument(help="Class identifier, with or without its root namespace."),
    ],
    paths: PathsArgument = None,
    exclude: ExcludeOption = None,
    extension: ExtensionOption = None,
    config: ConfigOption = None,
) -> None:
    """Show the mapping metadata of a single class.

    The lookup paths are scanned first so that the class is loaded. The
    class may be given by the identifier shown in the classes listing, for
    example ``user.User``, as long as it names a single mapped class.

    Examples:
        persistkit mapping show user.User src/models
    """
    try:
        driver = build_driver(paths, exclude, extension, config)
        matches = _match_class_names(class_name, driver.get_all_class_names())
        if not matches:
            print_error(f"Class {class_name!r} is not mapped under {', '.join(driver.paths)}")
            raise typer.Exit(code=1)
        if len(matches) > 1:
            print_error(f"Class {class_name!r} is ambiguous: {', '.join(matches)}")
            raise typer.Exit(code=1)
        metadata = ClassMetadata(name=matches[0])
        driver.load_metadata_for_class(matches[0], metadata)
    except (MappingConfigError, MappingError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print(create_metadata_table(metadata))


def _match_class_names(class_name: str, class_names: list[str]) -> list[str]:
    if class_name in class_names:
        return [class_name]
    return [name for name in class_names if short_name(name) == class_name]
