"""
recordcache Configuration

Configuration management with environment variable support.
Implements secure defaults and validation for all settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional
import hashlib
from functools import lru_cache
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings with validation and secure defaults."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Environment settings
    ENVIRONMENT: str = Field(
        default="development", description="Application environment"
    )

    # Redis configuration
    REDIS_URL: str = Field(
        default="redis://localhost:6379", description="Redis connection URL"
    )
    REDIS_MAX_CONNECTIONS: int = Field(
        default=10, ge=1, le=50, description="Redis connection pool size"
    )
    REDIS_OPERATION_TIMEOUT: float = Field(
        default=5.0, gt=0, le=60, description="Timeout per Redis operation in seconds"
    )
    REDIS_MAX_RETRIES: int = Field(
        default=3, ge=1, le=10, description="Attempts per Redis operation"
    )
    REDIS_RETRY_DELAY: float = Field(
        default=0.1,
        ge=0,
        le=10,
        description="Base delay of the exponential Redis retry backoff in seconds",
    )

    # Cache key derivation and entry lifetime
    CACHE_KEY_PREFIX: str = Field(
        default="", max_length=64, description="Prefix prepended to derived cache keys"
    )
    CACHE_KEY_ALGORITHM: str = Field(
        default="md5", description="hashlib algorithm used to derive cache keys"
    )
    CACHE_DEFAULT_TTL: Optional[int] = Field(
        default=None,
        ge=1,
        description="Backend default expiry in seconds when no TTL is passed",
    )
    CACHE_UPDATE_MISS_POLICY: str = Field(
        default="refresh",
        description="What update does when the record is not cached: refresh or skip",
    )

    # Development and debugging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="console", description="console or json")

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"ENVIRONMENT must be one of: {allowed}")
        return v

    @field_validator("REDIS_URL")
    @classmethod
    def validate_redis_url(cls, v):
        """Validate Redis URL format."""
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("REDIS_URL must be a redis://, rediss:// or unix:// URL")
        return v

    @field_validator("CACHE_KEY_ALGORITHM")
    @classmethod
    def validate_key_algorithm(cls, v):
        """Validate that hashlib provides the key algorithm."""
        v = v.lower()
        if v not in hashlib.algorithms_available:
            raise ValueError(f"CACHE_KEY_ALGORITHM '{v}' is not provided by hashlib")
        if v.startswith("shake_"):
            raise ValueError("CACHE_KEY_ALGORITHM must have a fixed digest length")
        return v

    @field_validator("CACHE_KEY_PREFIX")
    @classmethod
    def validate_key_prefix(cls, v):
        """Validate key prefix has no whitespace."""
        if any(char.isspace() for char in v):
            raise ValueError("CACHE_KEY_PREFIX cannot contain whitespace")
        return v

    @field_validator("CACHE_UPDATE_MISS_POLICY")
    @classmethod
    def validate_update_miss_policy(cls, v):
        """Validate update miss policy."""
        allowed = ["refresh", "skip"]
        if v.lower() not in allowed:
            raise ValueError(f"CACHE_UPDATE_MISS_POLICY must be one of: {allowed}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of: {allowed}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log renderer name."""
        allowed = ["console", "json"]
        if v.lower() not in allowed:
            raise ValueError(f"LOG_FORMAT must be one of: {allowed}")
        return v.lower()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Create global settings instance
settings = get_settings()
