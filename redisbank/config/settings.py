"""
Configuration management using Pydantic Settings.
Connection parameters come from the environment (REDISBANK_*) or a .env file.
"""
import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BankSettings(BaseSettings):
    """Databank settings with validation and environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="REDISBANK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Redis
    host: str = Field(default="127.0.0.1", description="Redis host")
    port: int = Field(default=6379, ge=1, le=65535, description="Redis port")
    database: int = Field(default=0, ge=0, description="Redis logical database")

    # Consistency
    serialize_mutations: bool = Field(
        default=False,
        description="Hold a per-record lock across deindex/write/reindex sequences"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level for the redisbank logger")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        level = v.upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def redis_url(self) -> str:
        return f"redis://{self.host}:{self.port}/{self.database}"


@lru_cache()
def get_settings() -> BankSettings:
    """Get cached settings instance."""
    return BankSettings()


def configure_logging(settings: BankSettings) -> logging.Logger:
    """Apply the configured level to the package logger and return it."""
    logger = logging.getLogger("redisbank")
    logger.setLevel(settings.log_level)
    return logger
