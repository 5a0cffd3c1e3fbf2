from __future__ import annotations

import pytest
from pydantic import ValidationError

from voicescribe.config.settings import Settings


def _load() -> Settings:
    return Settings(_env_file=None)  # type: ignore[call-arg]


def test_defaults(monkeypatch):
    for name in ("PORT", "BOT_TOKEN", "WEBHOOK_URL", "ELEVENLABS_API_KEY", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    s = _load()
    assert s.port == 3001
    assert s.bot_token is None
    assert not s.bot_enabled
    assert s.webhook_endpoint is None
    assert s.elevenlabs_model_id == "scribe_v1"
    assert s.log_level == "INFO"


def test_env_mapping(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.setenv("WEBHOOK_URL", "https://bot.example.com/")
    monkeypatch.setenv("ELEVENLABS_API_KEY", "xi")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    s = _load()
    assert s.port == 8080
    assert s.bot_enabled
    assert s.webhook_endpoint == "https://bot.example.com/telegram-webhook"
    assert s.elevenlabs_api_key == "xi"
    assert s.log_level == "DEBUG"


def test_blank_values_are_unset(monkeypatch):
    monkeypatch.setenv("BOT_TOKEN", "")
    monkeypatch.setenv("ELEVENLABS_API_KEY", "   ")
    s = _load()
    assert s.bot_token is None
    assert s.elevenlabs_api_key is None


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        _load()


def test_settings_are_frozen():
    s = _load()
    with pytest.raises(ValidationError):
        s.port = 1  # type: ignore[misc]
