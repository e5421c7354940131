"""Settings parsing."""

import pytest
from pydantic import ValidationError

from foodorder.core.config import EnvironmentMode, Settings


def test_defaults_validate_orders():
    settings = Settings(_env_file=None)

    assert settings.enforce_transitions is True
    assert settings.validate_order_totals is True
    assert settings.ledger_export_enabled is False
    assert settings.is_development


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ENV_MODE", "PRODUCTION")
    monkeypatch.setenv("ENFORCE_TRANSITIONS", "false")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test")

    settings = Settings(_env_file=None)

    assert settings.env_mode == EnvironmentMode.PRODUCTION
    assert settings.enforce_transitions is False
    assert settings.allowed_origins_list == ["http://a.test", "http://b.test"]


def test_invalid_env_mode():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, env_mode="qa")
