"""Storage configuration for persisted property files."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

AtomicReplaceMode = Literal["auto", "always", "never"]

DEFAULT_TEMP_SUFFIX = ".temp"
DEFAULT_STORE_COMMENT = "saved for test"


class StorageSettings(BaseSettings):
    """Controls how property files are written to disk."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    atomic_replace: AtomicReplaceMode = Field(
        default="auto",
        alias="OWNER_ATOMIC_REPLACE",
        description="'auto' decides from the os.name property; 'always'/'never' force the write strategy.",
    )
    temp_suffix: str = Field(default=DEFAULT_TEMP_SUFFIX, alias="OWNER_TEMP_SUFFIX", min_length=1)
    store_comment: str = Field(default=DEFAULT_STORE_COMMENT, alias="OWNER_STORE_COMMENT")
    fsync: bool = Field(default=True, alias="OWNER_FSYNC")

    @property
    def comment(self) -> str | None:
        return self.store_comment or None


__all__ = ["AtomicReplaceMode", "StorageSettings"]
