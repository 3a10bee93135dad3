"""
Application settings with Pydantic v2 validation.

Every group reads its own env prefix (``STORAGE_``, ``API_``, ``TENANT_``,
``INVENTORY_``); top-level values come from the environment or ``.env``.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """SQLite document database location and pool."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "zycle.db"

    pool_size: int = Field(default=5, ge=1, le=50)
    busy_timeout: int = Field(default=30000, ge=0)  # ms, waits on BEGIN IMMEDIATE
    backup_before_migrate: bool = True

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class TenantSettings(BaseSettings):
    """Which collection center a request belongs to."""

    model_config = SettingsConfigDict(env_prefix="TENANT_")

    header_name: str = "X-Tenant-ID"
    # When unset, every tenant-scoped request must carry the header
    default_id: str | None = None

    @field_validator("default_id")
    @classmethod
    def blank_default_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if "/" in v:
            raise ValueError("tenant id cannot contain '/'")
        return v or None


class InventorySettings(BaseSettings):
    """Material catalog and inventory report behaviour."""

    model_config = SettingsConfigDict(env_prefix="INVENTORY_")

    # Listing an empty catalog loads the default recyclable materials first
    seed_default_materials: bool = True
    recent_invoices_limit: int = Field(default=5, ge=1, le=50)
    top_materials_limit: int = Field(default=5, ge=1, le=50)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Zycle Back Office"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    tenant: TenantSettings = Field(default_factory=TenantSettings)
    inventory: InventorySettings = Field(default_factory=InventorySettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
