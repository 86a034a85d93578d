"""
Configuration Management for Financial Planning

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Which storage backend is used, and how to reach it, is decided by
configuration alone; business logic never branches on it.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Which persistence backend to use."""

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["local", "remote"] = Field(
        default="local",
        description="'local' (embedded SQLite) or 'remote' (hosted REST backend)"
    )


class LocalDatabaseSettings(BaseSettings):
    """Embedded SQLite database configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOCAL_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./financial_planning.db",
        description="SQLAlchemy async URL of the SQLite database"
    )
    echo: bool = Field(
        default=False,
        description="Log every SQL statement"
    )

    @field_validator('database_url')
    @classmethod
    def validate_driver(cls, v: str) -> str:
        """Plain sqlite URLs are upgraded to the async driver."""
        if v.startswith("sqlite:///") or v == "sqlite://":
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        if not v.startswith("sqlite+aiosqlite://"):
            raise ValueError(f"Unsupported local database URL: {v}")
        return v


class RemoteBackendSettings(BaseSettings):
    """Hosted relational backend (PostgREST-compatible API) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="REMOTE_BACKEND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: str = Field(
        ...,
        description="Project URL, e.g. https://xyz.example.co"
    )
    api_key: str = Field(
        ...,
        description="Public (anon) API key sent with every request"
    )
    rest_path: str = Field(
        default="/rest/v1",
        description="Path prefix of the REST endpoint"
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-request timeout; None waits indefinitely"
    )
    connect_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts when checking that the backend is reachable"
    )

    @field_validator('url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def rest_url(self) -> str:
        return f"{self.url}{self.rest_path}"


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
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False: human-readable console output)"
    )
    currency: str = Field(
        default="CHF",
        min_length=3,
        max_length=3,
        description="Display currency"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level


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

    # Sub-settings are loaded lazily so that a local-only setup does not
    # need remote credentials.

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def local_db(self) -> LocalDatabaseSettings:
        return LocalDatabaseSettings()

    @property
    def remote_backend(self) -> RemoteBackendSettings:
        return RemoteBackendSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


def _remote_selected(settings: Settings) -> bool:
    try:
        return settings.storage.backend == "remote"
    except ValidationError:
        return False


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
    {setting_name}_error entries for the groups that failed.
    Remote backend settings are only checked when that backend is selected.
    """
    results = {}

    settings = get_settings()

    groups = {
        "storage": lambda: settings.storage,
        "local_db": lambda: settings.local_db,
        "remote_backend": lambda: settings.remote_backend,
        "app": lambda: settings.app,
    }
    for name, load in groups.items():
        if name == "remote_backend" and not _remote_selected(settings):
            continue
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
