"""
Configuration management for SoraTV.

Handles loading, validation, and access to application configuration.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

from soratv.cache.base import CacheConfig
from soratv.channels.pipeline import PipelineSettings
from soratv.channels.preload import PRIORITY_COUNTRIES

# Global configuration instance
_config: Optional["SoraTVConfig"] = None


class ServerConfig(BaseModel):
    """Server configuration."""
    host: str = "0.0.0.0"
    port: int = 8420
    log_level: str = "INFO"


class CacheSettings(BaseModel):
    """Bounded channel cache configuration."""
    max_entries: int = Field(default=50, ge=1)
    max_total_weight: float = Field(default=30 * 1024 * 1024, gt=0)  # ~30MB
    cleanup_interval_seconds: float = Field(default=120, gt=0)  # 2 minutes
    stale_after_seconds: float = Field(default=1800, gt=0)  # 30 minutes
    enable_stats: bool = True

    def to_cache_config(self) -> CacheConfig:
        return CacheConfig(
            max_entries=self.max_entries,
            max_total_weight=self.max_total_weight,
            cleanup_interval_seconds=self.cleanup_interval_seconds,
            stale_after_seconds=self.stale_after_seconds,
            enable_stats=self.enable_stats,
        )


class DatasetConfig(BaseModel):
    """Channel dataset source configuration."""
    source: str = "data/channels.json"  # http(s) URL, file:// URL or path
    timeout_seconds: float = 30.0
    aliases: dict[str, str] = Field(
        default_factory=lambda: {"United States": "United States of America"}
    )


class PipelineConfig(BaseModel):
    """Query pipeline configuration."""
    default_page_size: int = Field(default=50, ge=1)
    country_sample_size: int = Field(default=20, ge=0)
    category_sample_size: int = Field(default=40, ge=0)
    country_weight_per_channel: float = 200
    category_weight_per_channel: float = 150
    page_weight_per_channel: float = 100
    single_flight: bool = False  # Share one computation between identical misses

    def to_settings(self) -> PipelineSettings:
        return PipelineSettings(
            country_sample_size=self.country_sample_size,
            category_sample_size=self.category_sample_size,
            country_weight_per_channel=self.country_weight_per_channel,
            category_weight_per_channel=self.category_weight_per_channel,
            page_weight_per_channel=self.page_weight_per_channel,
            single_flight=self.single_flight,
        )


class PreloadConfig(BaseModel):
    """Startup preload configuration."""
    enabled: bool = True
    countries: list[str] = Field(default_factory=lambda: list(PRIORITY_COUNTRIES))


class StorageConfig(BaseModel):
    """User history/favorites storage configuration."""
    directory: Optional[str] = None  # None = no client storage
    history_key: str = "sora_tv_history"
    favorites_key: str = "favorites"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = "logs/soratv.log"
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    to_console: bool = True


class SoraTVConfig(BaseModel):
    """Main SoraTV configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    dataset: DatasetConfig = Field(default_factory=DatasetConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    preload: PreloadConfig = Field(default_factory=PreloadConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> SoraTVConfig:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file. Defaults to config.yaml in the
            current directory or project root, or $SORATV_CONFIG.

    Returns:
        Loaded and validated configuration.
    """
    global _config

    if config_path is None:
        config_path = os.environ.get("SORATV_CONFIG")

    if config_path is None:
        possible_paths = [
            Path("config.yaml"),
            Path(__file__).parent.parent / "config.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data: dict[str, Any] = {}

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

    # Apply environment variable overrides
    env_overrides = _get_env_overrides()
    _deep_merge(config_data, env_overrides)

    _config = SoraTVConfig(**config_data)
    return _config


def get_config() -> SoraTVConfig:
    """
    Get the current configuration.

    Returns:
        Current configuration (loads default if not yet loaded).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> SoraTVConfig:
    """
    Reload configuration from disk.

    Returns:
        Freshly loaded configuration.
    """
    global _config
    _config = None
    return load_config()


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    # Map of environment variables to config paths
    env_map = {
        "SORATV_HOST": ("server", "host"),
        "SORATV_PORT": ("server", "port"),
        "SORATV_LOG_LEVEL": ("logging", "level"),
        "SORATV_DATASET_SOURCE": ("dataset", "source"),
        "SORATV_CACHE_MAX_ENTRIES": ("cache", "max_entries"),
        "SORATV_CACHE_MAX_WEIGHT": ("cache", "max_total_weight"),
        "SORATV_PRELOAD_ENABLED": ("preload", "enabled"),
        "SORATV_STORAGE_DIR": ("storage", "directory"),
    }
    # Values for string fields are kept verbatim
    string_vars = {
        "SORATV_HOST",
        "SORATV_LOG_LEVEL",
        "SORATV_DATASET_SOURCE",
        "SORATV_STORAGE_DIR",
    }

    for env_var, path in env_map.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        if env_var not in string_vars:
            value = _parse_env_value(value)
        _set_nested(overrides, path, value)

    return overrides


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type."""
    # Boolean
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    # Integer
    try:
        return int(value)
    except ValueError:
        pass

    # Float
    try:
        return float(value)
    except ValueError:
        pass

    return value


def _set_nested(d: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Set a nested dictionary value from a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Deep merge override into base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
