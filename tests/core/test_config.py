"""Tests for configuration management."""

from __future__ import annotations

import pytest

from goldsync.core.config import ConfigManager, GoldSyncConfig, get_default_config, load_config_from_env


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "GOLDSYNC_STORE_DB_PATH",
        "GOLDSYNC_STORE_COLLECTION",
        "GOLDSYNC_PROVIDER_BASE_URL",
        "GOLDSYNC_PROVIDER_ENDPOINT",
        "GOLDSYNC_PROVIDER_TIMEOUT",
        "GOLDSYNC_MAX_VALID_PRICE",
        "GOLDSYNC_LOGGING_LEVEL",
        "GOLDSYNC_LOGGING_FILE",
        "GOLDSYNC_TIMEZONE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = get_default_config()

    assert config.store.collection == "gold_price_history"
    assert config.provider.endpoint == "/api/sjc/formatted"
    assert config.provider.timeout is None
    assert config.provider.provider_tag == "SJC"
    assert config.integrity.max_valid_price == 200_000_000
    assert config.timezone == "Asia/Ho_Chi_Minh"
    assert str(config.tz()) == "Asia/Ho_Chi_Minh"


def test_from_dict_round_trip():
    config = GoldSyncConfig.from_dict(
        {
            "store": {"db_path": "/tmp/history.duckdb"},
            "provider": {"base_url": "https://gold.example.com", "timeout": 10.0},
            "timezone": "UTC",
        }
    )

    again = GoldSyncConfig.from_dict(config.to_dict())

    assert again == config
    assert again.provider.timeout == 10.0
    assert again.store.collection == "gold_price_history"


def test_to_dict_drops_unset_optionals():
    data = get_default_config().to_dict()
    assert "timeout" not in data["provider"]
    assert "file" not in data["logging"]


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("GOLDSYNC_PROVIDER_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("GOLDSYNC_PROVIDER_TIMEOUT", "12.5")
    monkeypatch.setenv("GOLDSYNC_MAX_VALID_PRICE", "150000000")
    monkeypatch.setenv("GOLDSYNC_TIMEZONE", "UTC")

    env = load_config_from_env()

    assert env == {
        "provider": {"base_url": "https://env.example.com", "timeout": 12.5},
        "integrity": {"max_valid_price": 150_000_000.0},
        "timezone": "UTC",
    }


def test_manager_missing_file_uses_defaults(tmp_path):
    manager = ConfigManager(tmp_path / "missing.toml")
    assert manager.get_config() == get_default_config()


def test_manager_loads_file_and_env(tmp_path, monkeypatch):
    path = tmp_path / "config.toml"
    path.write_text(
        '[store]\ndb_path = "/data/history.duckdb"\n\n[provider]\nbase_url = "https://file.example.com"\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("GOLDSYNC_PROVIDER_BASE_URL", "https://env.example.com")

    config = ConfigManager(path).get_config()

    assert config.store.db_path == "/data/history.duckdb"
    assert config.provider.base_url == "https://env.example.com"


def test_manager_invalid_file_falls_back(tmp_path, log_messages):
    path = tmp_path / "config.toml"
    path.write_text("this is = = not toml", encoding="utf-8")

    config = ConfigManager(path).get_config()

    assert config == get_default_config()
    assert any("Failed to load config" in entry["message"] for entry in log_messages)


def test_manager_unknown_key_falls_back(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[store]\nunknown = "x"\n', encoding="utf-8")

    assert ConfigManager(path).get_config() == get_default_config()


def test_update_and_save(tmp_path):
    path = tmp_path / "nested" / "config.toml"
    manager = ConfigManager(path)

    manager.update_config(integrity={"max_valid_price": 120_000_000}, provider={"base_url": "https://x.example.com"})
    manager.save_config()

    reloaded = ConfigManager(path).get_config()
    assert reloaded.integrity.max_valid_price == 120_000_000
    assert reloaded.provider.base_url == "https://x.example.com"
