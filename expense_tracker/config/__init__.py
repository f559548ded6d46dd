"""Configuration package."""

from expense_tracker.config.settings import (
    HMAC_ALGORITHMS,
    AppSettings,
    AuthSettings,
    GoogleSheetsSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "HMAC_ALGORITHMS",
    "AppSettings",
    "AuthSettings",
    "GoogleSheetsSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
