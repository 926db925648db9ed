"""Shared types and utilities for CLI commands.

This module provides the output format enum and the driver factory used
by the mapping commands.
"""

from enum import Enum
from pathlib import Path

from persistkit.core.config import MappingConfigNotFoundError, load_mapping_config
from persistkit.mapping.annotations import AttributeReader
from persistkit.mapping.driver import SimpleAnnotationDriver


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def build_driver(
    paths: list[Path] | None = None,
    exclude: list[Path] | None = None,
    extension: str | None = None,
    config_path: Path | None = None,
) -> SimpleAnnotationDriver:
    """Build an annotation driver from CLI arguments and configuration.

    A config file is read when one is given explicitly, or when no paths
    are given on the command line (falling back to the default location).
    Command-line paths and excludes are added on top of the configured
    ones, and an explicit extension overrides the configured one.

    Args:
        paths: Lookup directories given on the command line.
        exclude: Exclude directories given on the command line.
        extension: File extension override.
        config_path: Explicit mapping config file.

    Returns:
        Configured SimpleAnnotationDriver.

    Raises:
        MappingConfigError: If a required config file is missing or invalid.
    """
    if config_path is not None or not paths:
        try:
            config = load_mapping_config(config_path)
        except MappingConfigNotFoundError as e:
            if config_path is not None:
                raise
            msg = f"No lookup paths given and {e}"
            raise MappingConfigNotFoundError(msg) from e
        driver = SimpleAnnotationDriver.from_config(config, AttributeReader())
    else:
        driver = SimpleAnnotationDriver(AttributeReader())

    driver.add_paths([str(p.resolve()) for p in paths or []])
    driver.add_exclude_paths([str(p.resolve()) for p in exclude or []])
    if extension:
        driver.file_extension = extension
    return driver
