from __future__ import annotations

import pytest

from totpkit.config import Settings

# ASCII "12345678901234567890", the key used by the RFC 4226 and RFC 6238 test vectors
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Run every test against the built-in defaults, whatever the environment says."""
    for var in ("TOTP_TIME_STEP", "TOTP_WINDOW", "TOTP_SECRET_LENGTH", "TOTP_ISSUER", "TOTP_ACCOUNT_NAME"):
        monkeypatch.delenv(var, raising=False)
    s = Settings(_env_file=None)
    for target in ("totpkit.config.settings", "totpkit.totp.settings", "totpkit.settings"):
        monkeypatch.setattr(target, s)
    return s


@pytest.fixture
def rfc_secret() -> str:
    return RFC_SECRET
