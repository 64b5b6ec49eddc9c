"""Core configuration management using Pydantic settings."""
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from ticker_registry.services.similarity import DEFAULT_SIMILARITY_THRESHOLD


# Valid log levels
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

# Valid registry store backends
VALID_STORE_BACKENDS = ['memory', 'sql', 'redis']


class RegistryConfig(BaseModel):
    """Tunable rules of the ticker registry."""

    reservation_ttl_ms: int = Field(default=10 * 60 * 1000, gt=0)
    similarity_threshold: float = Field(default=DEFAULT_SIMILARITY_THRESHOLD, gt=0.0, lt=1.0)
    min_length: int = Field(default=2, ge=1)
    max_length: int = Field(default=10, ge=1)
    sweep_on_write: bool = True

    @model_validator(mode='after')
    def validate_lengths(self) -> 'RegistryConfig':
        """Ensure the length window is not empty."""
        if self.max_length < self.min_length:
            raise ValueError("max_length must be greater than or equal to min_length")
        return self

    @property
    def reservation_ttl_minutes(self) -> int:
        """Reservation window in whole minutes, for user-facing messages."""
        return self.reservation_ttl_ms // 60000


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./tickers.db"

    # Redis (redis_url should contain full connection string including port)
    redis_url: str = "redis://localhost:6379/0"
    redis_max_connections: int = 50
    redis_socket_timeout_seconds: float = 5.0

    # Registry store backend: memory, sql or redis
    store_backend: str = "memory"

    # Take the Redis writer lock for the sql backend too (several processes on one database)
    sql_shared_write_lock: bool = False

    # Logging
    log_level: str = "INFO"

    # Registry rules
    reservation_ttl_minutes: int = 10
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    ticker_min_length: int = 2
    ticker_max_length: int = 10
    sweep_on_write: bool = True

    # Expired reservation sweep cadence (minutes)
    cleanup_interval_minutes: int = 5

    # On-chain mirror relay (disabled when mirror_url is unset)
    mirror_url: Optional[str] = None
    mirror_api_key: Optional[str] = None
    mirror_timeout_seconds: float = 30.0

    # API Configuration
    backend_port: int = 8000

    # CORS Configuration
    cors_origins: str = "http://localhost:3000"  # Comma-separated list of allowed origins

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        upper_v = v.upper()
        if upper_v not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}")
        return upper_v

    @field_validator('store_backend')
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        """Validate the store backend name."""
        lower_v = v.lower()
        if lower_v not in VALID_STORE_BACKENDS:
            raise ValueError(f"store_backend must be one of {VALID_STORE_BACKENDS}")
        return lower_v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def registry_config(self) -> RegistryConfig:
        """Build the registry rule set from the flat environment settings."""
        return RegistryConfig(
            reservation_ttl_ms=self.reservation_ttl_minutes * 60 * 1000,
            similarity_threshold=self.similarity_threshold,
            min_length=self.ticker_min_length,
            max_length=self.ticker_max_length,
            sweep_on_write=self.sweep_on_write
        )


# Global settings instance
settings = Settings()
