"""
Configuration Management for Envelope Budget

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see which storage backends exist and
ensures configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Persistence backend configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["memory", "local", "google_sheets"] = Field(
        default="local",
        description="Which storage backend holds the ledger snapshot"
    )
    data_dir: Path = Field(
        default=Path(".envelope_budget"),
        description="Directory used by the local file backend"
    )
    state_key: str = Field(
        default="budgetAppState",
        min_length=1,
        description="Key under which the ledger snapshot is stored"
    )
    audit_file: str = Field(
        default="audit.jsonl",
        description="Audit log file name inside data_dir (local backend)"
    )

    @field_validator('state_key')
    @classmethod
    def validate_state_key(cls, v: str) -> str:
        """Keys become file names for the local backend."""
        if "/" in v or "\\" in v:
            raise ValueError("state_key cannot contain path separators")
        return v

    @property
    def audit_path(self) -> Path:
        return self.data_dir / self.audit_file


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    state_sheet_name: str = Field(
        default="LedgerState",
        description="Name of the key/value sheet holding snapshots"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Name of the sheet for audit logs"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Display
    currency_code: str = Field(
        default="INR",
        min_length=3,
        max_length=3,
        pattern=r"^[A-Z]{3}$",
        description="ISO currency code for all amounts"
    )
    currency_symbol: str = Field(
        default="₹",
        description="Symbol used when formatting amounts"
    )
    chart_months: int = Field(
        default=6,
        ge=1,
        le=36,
        description="How many months the income/expense chart shows"
    )

    # Input validation bounds
    account_name_min_length: int = Field(
        default=3,
        ge=1,
        description="Shortest allowed account name"
    )
    account_name_max_length: int = Field(
        default=50,
        ge=1,
        description="Longest allowed account name"
    )

    @model_validator(mode='after')
    def validate_name_bounds(self) -> 'AppSettings':
        if self.account_name_max_length < self.account_name_min_length:
            raise ValueError("account_name_max_length must be >= account_name_min_length")
        return self


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

    # Sub-settings are loaded lazily so Google Sheets can stay unconfigured

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.google_sheets
        results["google_sheets"] = True
    except Exception as e:
        results["google_sheets"] = False
        results["google_sheets_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
