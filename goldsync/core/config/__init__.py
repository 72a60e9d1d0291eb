"""Configuration module."""

from goldsync.core.config.settings import (
    DEFAULT_TIMEZONE,
    ConfigManager,
    GoldSyncConfig,
    IntegrityConfig,
    LoggingConfig,
    ProviderConfig,
    StoreConfig,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "DEFAULT_TIMEZONE",
    "ConfigManager",
    "GoldSyncConfig",
    "IntegrityConfig",
    "LoggingConfig",
    "ProviderConfig",
    "StoreConfig",
    "get_default_config",
    "load_config_from_env",
]
