import os

import pytest
from pydantic import ValidationError

from src.config import settings


def _apply_env(monkeypatch: pytest.MonkeyPatch, env: dict[str, str | None]) -> None:
    # Clear related envs first to avoid leakage across tests
    prefixes = ("APP_", "LOG_", "WS_", "BOOK_")
    for key in list(os.environ.keys()):
        if key.startswith(prefixes):
            monkeypatch.delenv(key, raising=False)

    for k, v in env.items():
        if v is None:
            monkeypatch.delenv(k, raising=False)
        else:
            monkeypatch.setenv(k, str(v))


def test_websocket_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    _apply_env(monkeypatch, {})
    ws = settings.WebsocketSettings(_env_file=None)

    assert ws.reconnect_max_attempts == 5
    assert ws.reconnect_base_delay_ms == 1000
    assert ws.reconnect_max_delay_ms == 30000
    assert ws.open_timeout == 10.0
    assert ws.ping_interval == 20.0


def test_websocket_settings_env_override(monkeypatch: pytest.MonkeyPatch):
    _apply_env(
        monkeypatch,
        {
            "WS_RECONNECT_MAX_ATTEMPTS": "8",
            "WS_RECONNECT_BASE_DELAY_MS": "500",
            "WS_RECONNECT_MAX_DELAY_MS": "60000",
            "WS_PING_INTERVAL": "0",
        },
    )
    ws = settings.WebsocketSettings(_env_file=None)

    assert ws.reconnect_max_attempts == 8
    assert ws.reconnect_base_delay_ms == 500
    assert ws.reconnect_max_delay_ms == 60000
    assert ws.ping_interval == 0.0


def test_websocket_settings_reject_invalid(monkeypatch: pytest.MonkeyPatch):
    _apply_env(monkeypatch, {"WS_RECONNECT_BASE_DELAY_MS": "0"})

    with pytest.raises(ValidationError):
        settings.WebsocketSettings(_env_file=None)


def test_orderbook_settings_defaults_and_override(monkeypatch: pytest.MonkeyPatch):
    _apply_env(monkeypatch, {})
    book = settings.OrderbookSettings(_env_file=None)
    assert book.max_levels_per_side == 50
    assert book.display_levels == 15

    _apply_env(monkeypatch, {"BOOK_DISPLAY_LEVELS": "25"})
    assert settings.OrderbookSettings(_env_file=None).display_levels == 25


def test_logging_settings_env_override(monkeypatch: pytest.MonkeyPatch):
    _apply_env(monkeypatch, {"LOG_LEVEL": "DEBUG", "LOG_TO_FILE": "true"})
    log = settings.LoggingSettings(_env_file=None)

    assert log.level == "DEBUG"
    assert log.to_file is True
    assert log.dir == "logs"


def test_app_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    _apply_env(monkeypatch, {})
    app = settings.AppSettings(_env_file=None)

    assert app.environment == "dev"
    assert app.debug is False
