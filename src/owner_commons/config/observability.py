"""Observability configuration for owner components."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ObservabilitySettings(BaseSettings):
    """Flags controlling logging behavior."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    log_level: str = Field(default="INFO", alias="OWNER_LOG_LEVEL")
    log_json: bool = Field(default=False, alias="OWNER_LOG_JSON")

    @field_validator("log_level")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()


__all__ = ["ObservabilitySettings"]
