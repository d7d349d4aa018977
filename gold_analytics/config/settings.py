"""
Gold Layer Analytics
Centralized Configuration Management

This module provides configuration management using Pydantic settings with
environment variable support, validation, and type safety.
"""

from functools import lru_cache
from typing import Optional
from pydantic import Field, field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class WarehouseSettings(BaseSettings):
    """Gold Layer Warehouse Configuration"""

    model_config = SettingsConfigDict(env_prefix="WAREHOUSE_")

    host: str = Field(default="localhost", description="Warehouse host")
    port: int = Field(default=5432, description="Warehouse port")
    db: str = Field(default="data_warehouse", alias="database", description="Database name")
    user: str = Field(default="analyst", description="Read-only warehouse user")
    password: SecretStr = Field(default="analyst_password", description="Warehouse password")
    schema_name: Optional[str] = Field(default="gold", description="Schema holding the Gold tables")
    url: Optional[str] = Field(default=None, description="SQLAlchemy URL (overrides host/port)")
    pool_size: int = Field(default=5, description="Connection pool size")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    echo: bool = Field(default=False, description="Echo SQL queries")

    @property
    def sync_url(self) -> str:
        """Warehouse URL - uses WAREHOUSE_URL if set, otherwise builds a psycopg2 URL"""
        if self.url:
            return self.url
        return f"postgresql+psycopg2://{self.user}:{self.password.get_secret_value()}@{self.host}:{self.port}/{self.db}"


class ReportSettings(BaseSettings):
    """Thresholds used by the report views and rankings"""

    model_config = SettingsConfigDict(env_prefix="REPORT_")

    # Product segmentation
    high_performer_sales: float = Field(default=50000, description="total_sales above this is High-Performer")
    mid_range_sales: float = Field(default=10000, description="total_sales at or above this is Mid-Range")

    # Customer segmentation
    vip_sales: float = Field(default=5000, description="total_sales above this is VIP")
    loyal_lifespan_months: int = Field(default=12, description="Minimum lifespan for VIP/Regular")

    # Misc
    selling_price_decimals: int = Field(default=1, description="Rounding of avg_selling_price")
    top_n: int = Field(default=5, description="Default size of ranking results")


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="gold-analytics", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    warehouse: WarehouseSettings = Field(default_factory=WarehouseSettings)
    reports: ReportSettings = Field(default_factory=ReportSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
