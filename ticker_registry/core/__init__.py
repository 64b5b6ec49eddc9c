"""Core package initialization."""
from ticker_registry.core.config import settings, Settings, RegistryConfig
from ticker_registry.core.database import Base, init_db
from ticker_registry.core.redis import get_redis, close_redis

__all__ = ["settings", "Settings", "RegistryConfig", "Base", "init_db", "get_redis", "close_redis"]
