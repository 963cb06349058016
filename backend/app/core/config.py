from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    debug: bool = Field(False, alias="ADDRCHECK_DEBUG")
    environment: Literal["development", "production", "test"] = Field(
        "production", alias="ADDRCHECK_ENVIRONMENT"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"], alias="ADDRCHECK_CORS_ORIGINS"
    )

    google_api_key: str = Field("test-google-key", alias="ADDRCHECK_GOOGLE_API_KEY")
    google_api_url: str = Field(
        "https://addressvalidation.googleapis.com/v1:validateAddress",
        alias="ADDRCHECK_GOOGLE_API_URL",
    )

    smarty_auth_id: str = Field("test-smarty-id", alias="ADDRCHECK_SMARTY_AUTH_ID")
    smarty_auth_token: str = Field(
        "test-smarty-token", alias="ADDRCHECK_SMARTY_AUTH_TOKEN"
    )
    smarty_api_url: str = Field(
        "https://us-street.api.smartystreets.com/street-address",
        alias="ADDRCHECK_SMARTY_API_URL",
    )
    smarty_match_strategy: Literal["strict", "invalid", "enhanced"] = Field(
        "invalid", alias="ADDRCHECK_SMARTY_MATCH_STRATEGY"
    )

    # Unset means provider calls never time out on our side.
    provider_timeout: float | None = Field(None, alias="ADDRCHECK_PROVIDER_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator(
        "google_api_key", "smarty_auth_id", "smarty_auth_token", mode="before"
    )
    def _strip_credential(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("environment", "smarty_match_strategy", mode="before")
    def _normalize_choice(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().lower()
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]
