"""Tests for configuration loading."""

from __future__ import annotations

import json
import logging

import pytest
import toml

pytestmark = [pytest.mark.unit, pytest.mark.config]

from btmeta.config.config import (
    CONFIG_FILE_NAME,
    ConfigManager,
    get_bencode_config,
    get_config,
    get_observability_config,
    init_config,
    reset_config,
    set_config,
)
from btmeta.models import Config, LogLevel
from btmeta.utils.exceptions import ConfigurationError


class TestConfigManager:
    """Test ConfigManager loading."""

    def test_defaults(self):
        """Test defaults without file or environment."""
        manager = ConfigManager()
        assert manager.config_file is None
        assert manager.config.observability.log_level is LogLevel.WARNING
        assert manager.config.observability.structured_logging is False
        assert manager.config.bencode.max_depth == 1000

    def test_load_toml(self, tmp_path):
        """Test values are read from a TOML file."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text(
            '[observability]\nlog_level = "DEBUG"\n\n[bencode]\nmax_depth = 50\n',
            encoding="utf-8",
        )
        manager = ConfigManager(config_file)
        assert manager.config_file == config_file
        assert manager.config.observability.log_level is LogLevel.DEBUG
        assert manager.config.bencode.max_depth == 50

    def test_finds_file_in_working_directory(self, tmp_path):
        """Test btmeta.toml in the working directory is picked up."""
        (tmp_path / CONFIG_FILE_NAME).write_text(
            "[bencode]\nmax_depth = 7\n", encoding="utf-8"
        )
        manager = ConfigManager()
        assert manager.config_file is not None
        assert manager.config.bencode.max_depth == 7

    def test_missing_explicit_file(self, tmp_path):
        """Test an explicit path that does not exist."""
        with pytest.raises(ConfigurationError, match="Config file not found"):
            ConfigManager(tmp_path / "absent.toml")

    def test_invalid_toml(self, tmp_path):
        """Test a file that is not TOML."""
        config_file = tmp_path / "broken.toml"
        config_file.write_text("not = [valid", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Failed to load config file"):
            ConfigManager(config_file)

    def test_invalid_values(self, tmp_path):
        """Test values that fail validation."""
        config_file = tmp_path / "bad.toml"
        config_file.write_text("[bencode]\nmax_depth = 0\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            ConfigManager(config_file)

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        """Test environment variables take precedence over the file."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text(
            '[observability]\nlog_level = "ERROR"\n[bencode]\nmax_depth = 50\n',
            encoding="utf-8",
        )
        monkeypatch.setenv("BTMETA_LOG_LEVEL", "info")
        monkeypatch.setenv("BTMETA_MAX_DEPTH", "64")
        monkeypatch.setenv("BTMETA_STRUCTURED_LOGGING", "yes")
        monkeypatch.setenv("BTMETA_LOG_FILE", str(tmp_path / "logs" / "btmeta.log"))

        config = ConfigManager(config_file).config
        assert config.observability.log_level is LogLevel.INFO
        assert config.observability.structured_logging is True
        assert config.observability.log_file == str(tmp_path / "logs" / "btmeta.log")
        assert config.bencode.max_depth == 64

    def test_invalid_environment_value(self, monkeypatch):
        """Test an environment value that fails validation."""
        monkeypatch.setenv("BTMETA_LOG_LEVEL", "LOUD")
        with pytest.raises(ConfigurationError):
            ConfigManager()

    def test_merge_config(self):
        """Test nested dictionaries merge recursively."""
        manager = ConfigManager()
        merged = manager._merge_config(
            {"a": {"x": 1, "y": 2}, "b": 1},
            {"a": {"y": 3}, "c": 4},
        )
        assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}

    def test_export_toml(self):
        """Test TOML export reloads to the same values."""
        exported = toml.loads(ConfigManager().export("toml"))
        assert exported["bencode"]["max_depth"] == 1000
        assert exported["observability"]["log_level"] == "WARNING"

    def test_export_json(self):
        """Test JSON export."""
        exported = json.loads(ConfigManager().export("json"))
        assert exported["bencode"] == {"max_depth": 1000}

    def test_export_unsupported(self):
        """Test an unknown export format."""
        with pytest.raises(ConfigurationError, match="Unsupported export format"):
            ConfigManager().export("yaml")


class TestGlobalConfig:
    """Test module-level configuration accessors."""

    def test_get_config_is_cached(self):
        """Test get_config returns the same instance until reset."""
        first = get_config()
        assert get_config() is first
        reset_config()
        assert get_config() is not first

    def test_init_config(self, tmp_path):
        """Test init_config replaces the global manager."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[bencode]\nmax_depth = 9\n", encoding="utf-8")
        manager = init_config(config_file)
        assert get_config() is manager.config
        assert get_bencode_config().max_depth == 9

    def test_set_config(self):
        """Test set_config swaps the active configuration."""
        new_config = Config(bencode={"max_depth": 3})
        set_config(new_config)
        assert get_config() is new_config
        assert get_observability_config() is new_config.observability

    def test_manager_setup_logging(self, tmp_path):
        """Test the manager applies its observability section."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text(
            '[observability]\nlog_level = "ERROR"\n', encoding="utf-8"
        )
        ConfigManager(config_file).setup_logging()
        assert logging.getLogger("btmeta").level == logging.ERROR

    def test_manager_setup_logging_level_override(self, tmp_path):
        """Test an explicit level replaces the configured one."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text(
            '[observability]\nlog_level = "ERROR"\n', encoding="utf-8"
        )
        manager = ConfigManager(config_file)
        manager.setup_logging(LogLevel.DEBUG)
        assert logging.getLogger("btmeta").level == logging.DEBUG
        assert manager.config.observability.log_level is LogLevel.ERROR
