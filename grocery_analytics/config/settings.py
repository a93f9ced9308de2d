"""
Grocery Dashboard Analytics
Configuration

Every setting is read from the environment (or a `.env` file) through
pydantic-settings. Sections map to environment prefixes:

    POSTGRES_*   operational database the engine reads from
    REDIS_*      optional snapshot cache
    ANALYTICS_*  aggregation tuning (ranking length, stock threshold, ranges)
    LOG_*        structured logging
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

REPORTING_RANGES = ("week", "month", "year")
ENVIRONMENTS = ("development", "staging", "production", "testing")


class DatabaseSettings(BaseSettings):
    """Operational PostgreSQL database (read-only for analytics)"""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_")

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    name: str = Field(default="grocery", description="Database name")
    user: str = Field(default="grocery", description="Database user")
    password: SecretStr = Field(default="grocery", description="Database password")
    echo: bool = Field(default=False, description="Log emitted SQL")
    url: Optional[str] = Field(default=None, description="Complete SQLAlchemy async URL")

    @property
    def async_url(self) -> str:
        """SQLAlchemy URL; POSTGRES_URL wins over the individual parts"""
        if self.url:
            return self.url
        secret = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{secret}@{self.host}:{self.port}/{self.name}"


class RedisSettings(BaseSettings):
    """Snapshot cache; the service runs without it when unreachable"""

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    host: str = Field(default="localhost")
    port: int = Field(default=6379)
    db: int = Field(default=0)
    password: Optional[SecretStr] = Field(default=None)
    max_connections: int = Field(default=20)
    socket_timeout: int = Field(default=5, description="Seconds")
    url: Optional[str] = Field(default=None, description="Complete redis:// URL")

    def get_url(self) -> str:
        if self.url:
            return self.url
        auth = f":{self.password.get_secret_value()}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


class AnalyticsSettings(BaseSettings):
    """Aggregation tuning"""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    top_n: int = Field(default=10, ge=1, description="Length of every ranked list")
    low_stock_threshold: int = Field(default=10, ge=0, description="Stock at or below this counts as low")
    default_range: str = Field(default="month", description="Range used when a request names none")
    snapshot_ttl_seconds: int = Field(default=300, ge=1, description="Lifetime of cached snapshots")

    @field_validator("default_range")
    @classmethod
    def validate_range(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in REPORTING_RANGES:
            raise ValueError(f"Range must be one of: {list(REPORTING_RANGES)}")
        return v


class LoggingSettings(BaseSettings):
    """structlog output"""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")
    format: str = Field(default="json", description="json or text")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("Log format must be json or text")
        return v


class Settings(BaseSettings):
    """
    Application settings.

    Sub-sections read their own prefixed variables; only the application
    identity lives at the top level.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="grocery-analytics", alias="APP_NAME")
    app_env: str = Field(default="development", alias="APP_ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    version: str = Field(default="1.0.0")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        v = v.lower()
        if v not in ENVIRONMENTS:
            raise ValueError(f"Environment must be one of: {list(ENVIRONMENTS)}")
        return v

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache()
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()
