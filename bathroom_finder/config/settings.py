"""Application configuration settings."""
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    url: str = Field(
        default="sqlite+aiosqlite:///./bathroom_finder.db",
        validation_alias="DATABASE_URL"
    )
    echo: bool = Field(default=False, validation_alias="DATABASE_ECHO")
    pool_size: int = Field(default=10, validation_alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(default=20, validation_alias="DATABASE_MAX_OVERFLOW")


class AuthSettings(BaseSettings):
    """Credential hashing configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # bcrypt accepts cost factors 4..31; every step doubles the work.
    bcrypt_rounds: int = Field(default=10, ge=4, le=31, validation_alias="BCRYPT_ROUNDS")


class APISettings(BaseSettings):
    """API configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    title: str = "Bathroom Finder"
    description: str = "Public bathroom directory with user accounts"
    version: str = "0.1.0"
    host: str = Field(default="0.0.0.0", validation_alias="API_HOST")
    port: int = Field(default=8000, validation_alias="API_PORT")
    reload: bool = Field(default=False, validation_alias="API_RELOAD")

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        validation_alias="CORS_ORIGINS"
    )


class MonitoringSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    debug: bool = Field(default=True, validation_alias="DEBUG")

    # Sub-configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    api: APISettings = Field(default_factory=APISettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)


# Global settings instance
settings = Settings()
