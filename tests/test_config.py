"""Tests for configuration loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from totpkit.config import Settings


def test_settings_defaults():
    s = Settings(_env_file=None)
    assert s.time_step == 30
    assert s.window == 1
    assert s.secret_length == 20
    assert s.issuer == "MyApp"
    assert s.account_name == "user@example.com"


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("TOTP_TIME_STEP", "60")
    monkeypatch.setenv("TOTP_WINDOW", "2")
    monkeypatch.setenv("TOTP_ISSUER", "Acme")
    s = Settings(_env_file=None)
    assert s.time_step == 60
    assert s.window == 2
    assert s.issuer == "Acme"


def test_settings_from_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("TOTP_SECRET_LENGTH=32\nTOTP_ACCOUNT_NAME=ops@acme.io\n")
    s = Settings(_env_file=env_file)
    assert s.secret_length == 32
    assert s.account_name == "ops@acme.io"


@pytest.mark.parametrize("field,value", [("time_step", 0), ("window", -1), ("secret_length", 0)])
def test_settings_validation(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})
