"""Tests for persisted settings."""

import json

import pytest

from goldwatch.settings import (
    Settings,
    SettingsStore,
    TelegramConfig,
    settings_from_env,
    validate_threshold,
)


def test_missing_file_uses_defaults(tmp_path):
    defaults = Settings(threshold=1_500_000)
    store = SettingsStore(path=tmp_path / "settings.json", defaults=defaults)

    assert store.threshold == 1_500_000
    assert store.telegram == TelegramConfig()
    assert not (tmp_path / "settings.json").exists()


def test_updates_survive_restart(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    store = SettingsStore(path=path, defaults=Settings())
    store.update_threshold("3100000")
    store.update_telegram(bot_token=" 123:abc ", chat_id=42, enabled=True)

    reloaded = SettingsStore(path=path, defaults=Settings())

    assert reloaded.threshold == 3_100_000
    assert reloaded.telegram == TelegramConfig(bot_token="123:abc", chat_id="42", enabled=True)
    assert json.loads(path.read_text())["threshold"] == 3_100_000


def test_partial_telegram_update_keeps_other_fields(tmp_path):
    store = SettingsStore(
        path=tmp_path / "s.json",
        defaults=Settings(telegram=TelegramConfig("tok", "1", True)),
    )
    store.update_telegram(enabled=False)

    assert store.telegram == TelegramConfig("tok", "1", False)


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")

    store = SettingsStore(path=path, defaults=Settings(threshold=123))

    assert store.threshold == 123


def test_invalid_stored_threshold_is_ignored(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"threshold": -5, "telegram": {"chat_id": "7"}}))

    store = SettingsStore(path=path, defaults=Settings(threshold=999))

    assert store.threshold == 999
    assert store.telegram.chat_id == "7"


@pytest.mark.parametrize("value", [-1, "abc", None, True, float("nan"), float("inf")])
def test_validate_threshold_rejects(value):
    with pytest.raises(ValueError):
        validate_threshold(value)


def test_update_threshold_rejects_invalid(tmp_path):
    store = SettingsStore(path=tmp_path / "s.json", defaults=Settings(threshold=10))
    with pytest.raises(ValueError):
        store.update_threshold("lots")
    assert store.threshold == 10


def test_masked_token():
    config = TelegramConfig(bot_token="123456:secret-WXYZ", chat_id="1", enabled=True)
    masked = config.masked()

    assert masked["bot_token"].endswith("WXYZ")
    assert "secret" not in masked["bot_token"]
    assert masked["configured"] is True
    assert TelegramConfig(bot_token="abc").masked()["bot_token"] == "***"


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "env-token")
    monkeypatch.setenv("TELEGRAM_CHAT_ID", "555")
    monkeypatch.setenv("GOLD_THRESHOLD", "2500000")

    settings = settings_from_env()

    assert settings.telegram == TelegramConfig("env-token", "555", True)
    assert settings.threshold == 2_500_000


def test_settings_from_env_ignores_bad_threshold(monkeypatch):
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    monkeypatch.delenv("TELEGRAM_CHAT_ID", raising=False)
    monkeypatch.setenv("GOLD_THRESHOLD", "plenty")

    settings = settings_from_env()

    assert settings.threshold == 2_900_000
    assert not settings.telegram.enabled
