"""
Configuration Management for Nexa Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, the snapshot key and the ledger policies are read once
and validated at startup.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_STORAGE_KEY = "nexa-ledger-state-v1"


class ReferentialPolicy(str, Enum):
    """
    How the ledger treats intents whose references do not resolve.

    TOLERATE records the entity anyway (no balance effect for unknown
    accounts). REJECT refuses the intent and leaves the state unchanged.
    """
    TOLERATE = "tolerate"
    REJECT = "reject"


class StorageSettings(BaseSettings):
    """Durable snapshot storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="NEXA_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path.home() / ".nexa-ledger",
        description="Directory holding the snapshot files"
    )
    key: str = Field(
        default=DEFAULT_STORAGE_KEY,
        min_length=1,
        description="Fixed key the ledger snapshot is stored under"
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed snapshot write is attempted"
    )

    @field_validator('key')
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys become file names, so path separators are not allowed."""
        if "/" in v or "\\" in v or v in {".", ".."}:
            raise ValueError(f"Storage key must be a plain name, got: {v!r}")
        return v


class LedgerSettings(BaseSettings):
    """Ledger store behaviour."""

    model_config = SettingsConfigDict(
        env_prefix="NEXA_LEDGER_",
        extra="ignore"
    )

    referential_policy: ReferentialPolicy = Field(
        default=ReferentialPolicy.TOLERATE,
        description="Tolerate or reject intents with unresolved references"
    )
    autosave: bool = Field(
        default=True,
        description="Persist the snapshot after every committed intent"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment, bound to every audit log line"
    )
    debug_mode: bool = Field(
        default=False,
        description="Log nexa_ledger at DEBUG level instead of INFO"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries describing failures.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "ledger", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
