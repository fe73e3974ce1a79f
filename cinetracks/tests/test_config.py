from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from cinetracks.shared.config import AppConfig, ResilienceConfig, SessionConfig


def test_session_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SESSION_STORE", raising=False)

    config = SessionConfig(_env_file=None)

    assert config.store == "file"
    assert config.store_dir == Path("instance/sessions")
    assert config.expiry_margin_seconds == 300.0
    assert config.landing_path == "/dashboard"
    assert config.login_path == "/login"
    assert config.idle_timeout_seconds == 1800.0


def test_store_is_normalized() -> None:
    assert SessionConfig(store=" Database ").store == "database"


def test_unknown_store_is_rejected() -> None:
    with pytest.raises(ValidationError):
        SessionConfig(store="redis")


def test_idle_timeout_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SESSION_IDLE_TIMEOUT", "90")

    assert SessionConfig(_env_file=None).idle_timeout_seconds == 90.0


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SESSION_EXPIRY_MARGIN", "60")
    monkeypatch.setenv("AUTH_SERVICE_URL", "http://auth.internal:8081/")
    monkeypatch.setenv("RESILIENCE_RETRIES", "4")

    config = AppConfig(_env_file=None)

    assert config.expiry_margin_ms() == 60_000
    assert config.auth.base_url == "http://auth.internal:8081"
    assert config.resilience.max_retries == 4


def test_negative_retries_are_rejected() -> None:
    with pytest.raises(ValidationError):
        ResilienceConfig(max_retries=-1)


def test_production_requires_real_secret() -> None:
    with pytest.raises(SystemExit):
        AppConfig(app_env="production", secret_key="dev")


def test_production_with_secret_loads() -> None:
    config = AppConfig(app_env="prod", secret_key="a-long-random-value")

    assert config.is_production() is True
