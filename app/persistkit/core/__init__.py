"""Core configuration and path management for persistkit."""

from persistkit.core.config import (
    MappingConfig,
    MappingConfigError,
    MappingConfigNotFoundError,
    MappingConfigParseError,
    load_mapping_config,
)
from persistkit.core.paths import get_config_dir, get_mapping_config_path

__all__ = [
    "MappingConfig",
    "MappingConfigError",
    "MappingConfigNotFoundError",
    "MappingConfigParseError",
    "get_config_dir",
    "get_mapping_config_path",
    "load_mapping_config",
]
