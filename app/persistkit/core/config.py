"""Mapping driver configuration.

Lookup paths, exclude paths and the source file extension can be kept in
a TOML file, either at the top level or in a ``[mapping]`` table::

    [mapping]
    paths = ["src/models"]
    exclude_paths = ["src/models/legacy"]
    file_extension = ".py"

Relative paths are resolved against the directory holding the file.
"""

import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from persistkit.core.paths import get_mapping_config_path


class MappingConfig(BaseModel):
    """Configuration of an annotation mapping driver.

    Attributes:
        paths: Directories where mapped classes are looked up.
        exclude_paths: Directories whose files are skipped.
        file_extension: Suffix of mapping source files.
    """

    model_config = ConfigDict(extra="forbid")

    paths: Annotated[
        list[str],
        Field(default_factory=list, description="Directories holding mapped classes"),
    ]
    exclude_paths: Annotated[
        list[str],
        Field(default_factory=list, description="Directories excluded from lookup"),
    ]
    file_extension: Annotated[str, Field(description="Mapping source file suffix")] = ".py"

    @field_validator("file_extension")
    @classmethod
    def validate_file_extension(cls, v: str) -> str:
        """Validate that the extension is a non-empty dotted suffix."""
        extension = v.strip()
        if not extension:
            msg = "file_extension cannot be empty"
            raise ValueError(msg)
        if not extension.startswith("."):
            msg = f"file_extension must start with '.', got {extension!r}"
            raise ValueError(msg)
        return extension


class MappingConfigError(Exception):
    """Base exception for mapping configuration errors."""


class MappingConfigNotFoundError(MappingConfigError):
    """Raised when the mapping config file is not found."""


class MappingConfigParseError(MappingConfigError):
    """Raised when the mapping config file cannot be parsed."""


def load_mapping_config(path: Path | None = None) -> MappingConfig:
    """Load mapping configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default path.

    Returns:
        Validated MappingConfig with relative paths made absolute.

    Raises:
        MappingConfigNotFoundError: If the config file doesn't exist.
        MappingConfigParseError: If the TOML syntax is invalid.
        MappingConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_mapping_config_path()

    if not config_path.exists():
        raise MappingConfigNotFoundError(f"Mapping config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise MappingConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise MappingConfigError(f"Failed to read mapping config: {e}") from e

    section = data.get("mapping", data)

    try:
        config = MappingConfig.model_validate(section)
    except (ValueError, ValidationError) as e:
        raise MappingConfigError(f"Invalid mapping config content: {e}") from e

    base_dir = config_path.resolve().parent
    return config.model_copy(
        update={
            "paths": [_absolute(p, base_dir) for p in config.paths],
            "exclude_paths": [_absolute(p, base_dir) for p in config.exclude_paths],
        }
    )


def _absolute(path: str, base_dir: Path) -> str:
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return str(candidate)
    return str(base_dir / candidate)
