"""Configuration package."""

from finplan.config.settings import (
    AppSettings,
    LocalDatabaseSettings,
    RemoteBackendSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "LocalDatabaseSettings",
    "RemoteBackendSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
