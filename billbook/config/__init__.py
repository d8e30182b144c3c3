"""Configuration package."""

from billbook.config.settings import (
    SUPPORTED_LOCALES,
    AppSettings,
    GoogleSheetsSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "SUPPORTED_LOCALES",
    "AppSettings",
    "GoogleSheetsSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
