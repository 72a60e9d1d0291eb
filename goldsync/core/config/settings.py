"""Configuration management for goldsync."""

from __future__ import annotations

import os
import tomllib
from dataclasses import asdict, dataclass, field
from datetime import tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from goldsync.core.logging import logger

DEFAULT_TIMEZONE = "Asia/Ho_Chi_Minh"


@dataclass
class StoreConfig:
    """Document store configuration."""

    db_path: str = str(Path.home() / ".goldsync" / "history.duckdb")
    collection: str = "gold_price_history"


@dataclass
class ProviderConfig:
    """Remote quotation provider configuration."""

    base_url: str = "http://localhost:3000"
    endpoint: str = "/api/sjc/formatted"
    # None disables the request timeout entirely.
    timeout: float | None = None
    provider_tag: str = "SJC"


@dataclass
class IntegrityConfig:
    """Cached series integrity configuration."""

    max_valid_price: float = 200_000_000


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str | None = None


@dataclass
class GoldSyncConfig:
    """Top level goldsync configuration."""

    store: StoreConfig = field(default_factory=StoreConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    integrity: IntegrityConfig = field(default_factory=IntegrityConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    timezone: str = DEFAULT_TIMEZONE

    def tz(self) -> tzinfo:
        """Return the local calendar timezone used for day boundaries."""
        return ZoneInfo(self.timezone)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> GoldSyncConfig:
        """Build a configuration from a nested dictionary."""
        return cls(
            store=StoreConfig(**config_dict.get("store", {})),
            provider=ProviderConfig(**config_dict.get("provider", {})),
            integrity=IntegrityConfig(**config_dict.get("integrity", {})),
            logging=LoggingConfig(**config_dict.get("logging", {})),
            timezone=config_dict.get("timezone", DEFAULT_TIMEZONE),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a nested dictionary, dropping unset optional values."""

        def _drop_none(section: dict[str, Any]) -> dict[str, Any]:
            return {k: v for k, v in section.items() if v is not None}

        return {
            "store": _drop_none(asdict(self.store)),
            "provider": _drop_none(asdict(self.provider)),
            "integrity": _drop_none(asdict(self.integrity)),
            "logging": _drop_none(asdict(self.logging)),
            "timezone": self.timezone,
        }


def _deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = _deep_update(d.get(k, {}), v)
        else:
            d[k] = v
    return d


class ConfigManager:
    """Loads, updates and persists the goldsync configuration file."""

    def __init__(self, config_path: Path | None = None):
        """Initialise the manager.

        Args:
            config_path: Path of the TOML file, ``~/.goldsync/config.toml`` when None
        """
        self.config_path = config_path or Path.home() / ".goldsync" / "config.toml"
        self.config = self._load_config()

    def _load_config(self) -> GoldSyncConfig:
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                config_dict = {}

        _deep_update(config_dict, load_config_from_env())
        try:
            return GoldSyncConfig.from_dict(config_dict)
        except TypeError as e:
            logger.warning(f"Invalid config in {self.config_path}: {e}")
            return GoldSyncConfig()

    def get_config(self) -> GoldSyncConfig:
        """Return the active configuration."""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """Apply nested updates to the active configuration."""
        config_dict = _deep_update(self.config.to_dict(), updates)
        self.config = GoldSyncConfig.from_dict(config_dict)

    def save_config(self) -> None:
        """Write the active configuration to ``config_path``."""
        import tomli_w

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "wb") as f:
            tomli_w.dump(self.config.to_dict(), f)


def get_default_config() -> GoldSyncConfig:
    """Return a configuration with every default applied."""
    return GoldSyncConfig()


def load_config_from_env() -> dict[str, Any]:
    """Read ``GOLDSYNC_*`` environment variables into a nested dictionary."""
    config: dict[str, Any] = {}

    store_config: dict[str, Any] = {}
    if os.getenv("GOLDSYNC_STORE_DB_PATH"):
        store_config["db_path"] = os.getenv("GOLDSYNC_STORE_DB_PATH")
    if os.getenv("GOLDSYNC_STORE_COLLECTION"):
        store_config["collection"] = os.getenv("GOLDSYNC_STORE_COLLECTION")
    if store_config:
        config["store"] = store_config

    provider_config: dict[str, Any] = {}
    if os.getenv("GOLDSYNC_PROVIDER_BASE_URL"):
        provider_config["base_url"] = os.getenv("GOLDSYNC_PROVIDER_BASE_URL")
    if os.getenv("GOLDSYNC_PROVIDER_ENDPOINT"):
        provider_config["endpoint"] = os.getenv("GOLDSYNC_PROVIDER_ENDPOINT")
    goldsync_provider_timeout = os.getenv("GOLDSYNC_PROVIDER_TIMEOUT")
    if goldsync_provider_timeout is not None:
        provider_config["timeout"] = float(goldsync_provider_timeout)
    if provider_config:
        config["provider"] = provider_config

    goldsync_max_valid_price = os.getenv("GOLDSYNC_MAX_VALID_PRICE")
    if goldsync_max_valid_price is not None:
        config["integrity"] = {"max_valid_price": float(goldsync_max_valid_price)}

    logging_config: dict[str, Any] = {}
    goldsync_logging_level = os.getenv("GOLDSYNC_LOGGING_LEVEL")
    if goldsync_logging_level is not None:
        logging_config["level"] = goldsync_logging_level
    goldsync_logging_file = os.getenv("GOLDSYNC_LOGGING_FILE")
    if goldsync_logging_file is not None:
        logging_config["file"] = goldsync_logging_file
    if logging_config:
        config["logging"] = logging_config

    if os.getenv("GOLDSYNC_TIMEZONE"):
        config["timezone"] = os.getenv("GOLDSYNC_TIMEZONE")

    return config
