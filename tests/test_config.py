import logging

import pytest
from pydantic import ValidationError

from core.config import LOG_FORMAT, Settings, configure_logging


def test_empty_environment_is_offline():
    settings = Settings.from_env({})
    assert settings.offline
    assert settings.timeout_seconds == 5.0
    assert settings.log_level == "INFO"


def test_values_read_from_environment():
    settings = Settings.from_env({
        "LENDWISE_API_URL": "https://portal.example/api",
        "LENDWISE_API_TOKEN": "secret",
        "LENDWISE_TIMEOUT_SECONDS": "12.5",
        "LENDWISE_LOG_LEVEL": "debug",
    })
    assert not settings.offline
    assert settings.api_token == "secret"
    assert settings.timeout_seconds == 12.5
    assert settings.log_level == "DEBUG"


def test_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        Settings.from_env({"LENDWISE_TIMEOUT_SECONDS": "0"})


def test_configure_logging(monkeypatch):
    seen = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: seen.update(kw))
    configure_logging("warning")
    assert seen == {"level": logging.WARNING, "format": LOG_FORMAT}
