"""Unit tests for XDG path management."""

import os
from pathlib import Path
from unittest.mock import patch

from persistkit.core.paths import APP_NAME, get_config_dir, get_mapping_config_path


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            os.environ.pop("XDG_CONFIG_HOME", None)

            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME


class TestGetMappingConfigPath:
    """Tests for get_mapping_config_path function."""

    def test_mapping_config_path(self, tmp_path: Path) -> None:
        """The mapping config lives in the config directory."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_mapping_config_path()

        assert result == tmp_path / APP_NAME / "mapping.toml"
