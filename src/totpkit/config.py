"""Default TOTP parameters, loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TOTP_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Seconds per counter step; shared by generation, verification and URIs
    time_step: int = Field(default=30, gt=0)

    # Steps of drift tolerated on each side of the current counter
    window: int = Field(default=1, ge=0)

    # Base32 characters in a freshly generated secret
    secret_length: int = Field(default=20, gt=0)

    # Provisioning URI labels
    issuer: str = "MyApp"
    account_name: str = "user@example.com"


settings = Settings()
