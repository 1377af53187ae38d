"""Configuration management for btmeta.

Provides centralized configuration with TOML support and validation, loaded
hierarchically from defaults → config file → environment.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import toml

from btmeta.models import BencodeConfig, Config, LogLevel, ObservabilityConfig
from btmeta.utils.exceptions import ConfigurationError
from btmeta.utils.logging_config import get_logger, setup_logging

CONFIG_FILE_NAME = "btmeta.toml"

# Mapping of environment variables to config paths
ENV_MAPPINGS: dict[str, str] = {
    "BTMETA_LOG_LEVEL": "observability.log_level",
    "BTMETA_LOG_FILE": "observability.log_file",
    "BTMETA_STRUCTURED_LOGGING": "observability.structured_logging",
    "BTMETA_LOG_CORRELATION_ID": "observability.log_correlation_id",
    "BTMETA_MAX_DEPTH": "bencode.max_depth",
}

# Global configuration instance
_config_manager: ConfigManager | None = None


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_file: str | Path | None = None):
        """Initialize configuration manager.

        Args:
            config_file: Path to TOML config file. If None, searches for btmeta.toml

        """
        self.config_file = self._find_config_file(config_file)
        self.config = self._load_config()

    def _find_config_file(
        self,
        config_file: str | Path | None,
    ) -> Path | None:
        """Find configuration file in standard locations."""
        if config_file:
            return Path(config_file)

        # Search in current directory, then home directory
        search_paths = [
            Path.cwd() / CONFIG_FILE_NAME,
            Path.home() / ".config" / "btmeta" / CONFIG_FILE_NAME,
            Path.home() / f".{CONFIG_FILE_NAME}",
        ]

        for path in search_paths:
            if path.exists():
                return path

        return None

    def _load_config(self) -> Config:
        """Load configuration from file and environment."""
        config_data: dict[str, Any] = {}

        if self.config_file is not None:
            if not self.config_file.exists():
                msg = f"Config file not found: {self.config_file}"
                raise ConfigurationError(msg)
            try:
                with open(self.config_file, encoding="utf-8") as f:
                    config_data.update(toml.load(f))
            except (OSError, toml.TomlDecodeError) as e:
                msg = f"Failed to load config file {self.config_file}: {e}"
                raise ConfigurationError(msg) from e

        config_data = self._merge_config(config_data, self._get_env_config())

        try:
            return Config(**config_data)
        except Exception as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigurationError(msg) from e

    def _get_env_config(self) -> dict[str, Any]:
        """Get configuration from environment variables."""
        env_config: dict[str, Any] = {}

        def _parse_env_value(raw: str) -> bool | int | float | str:
            low = raw.lower()
            if low in {"true", "yes", "on"}:
                return True
            if low in {"false", "no", "off"}:
                return False
            try:
                if "." in raw:
                    return float(raw)
                return int(raw)
            except ValueError:
                return raw

        def _set_nested(d: dict[str, Any], path: str, value: Any) -> None:
            parts = path.split(".")
            cur = d
            for p in parts[:-1]:
                cur = cur.setdefault(p, {})
            cur[parts[-1]] = value

        for env_name, cfg_path in ENV_MAPPINGS.items():
            raw = os.getenv(env_name)
            if raw is None:
                continue
            if cfg_path in {"observability.log_level", "observability.log_file"}:
                value: Any = raw.upper() if cfg_path.endswith("log_level") else raw
            else:
                value = _parse_env_value(raw)
            _set_nested(env_config, cfg_path, value)

        return env_config

    def _merge_config(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Merge configuration dictionaries recursively."""
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value

        return result

    def export(self, fmt: str = "toml") -> str:
        """Export current configuration as a string in the given format.

        Args:
            fmt: one of "toml" or "json"

        """
        data = self.config.model_dump(mode="json", exclude_none=True)

        fmt = (fmt or "toml").lower()
        if fmt == "toml":
            return toml.dumps(data)
        if fmt == "json":
            return json.dumps(data, indent=2)
        msg = f"Unsupported export format: {fmt}"
        raise ConfigurationError(msg)

    def setup_logging(self, log_level: LogLevel | None = None) -> None:
        """Set up logging from the observability section.

        Args:
            log_level: Level to use instead of the configured one

        """
        observability = self.config.observability
        if log_level is not None:
            observability = observability.model_copy(update={"log_level": log_level})
        setup_logging(observability)


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.config


def init_config(config_file: str | Path | None = None) -> ConfigManager:
    """Initialize the global configuration manager."""
    global _config_manager
    _config_manager = ConfigManager(config_file)
    get_logger(__name__).debug(
        "Loaded configuration from %s", _config_manager.config_file or "defaults"
    )
    return _config_manager


def set_config(new_config: Config) -> None:
    """Replace the global configuration at runtime."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(None)
    _config_manager.config = new_config


def reset_config() -> None:
    """Forget the global configuration so the next access reloads it."""
    global _config_manager
    _config_manager = None


def get_observability_config() -> ObservabilityConfig:
    """Get observability configuration."""
    return get_config().observability


def get_bencode_config() -> BencodeConfig:
    """Get bencode decoder configuration."""
    return get_config().bencode
