"""Configuration package."""

from nexa_ledger.config.settings import (
    DEFAULT_STORAGE_KEY,
    AppSettings,
    LedgerSettings,
    ReferentialPolicy,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "AppSettings",
    "LedgerSettings",
    "ReferentialPolicy",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
