"""Registry wiring and FastAPI dependencies."""
import logging
from fastapi import Request
from ticker_registry.core.config import settings
from ticker_registry.services.ticker_service import RegistryService


logger = logging.getLogger(__name__)


async def build_registry_service() -> RegistryService:
    """
    Construct the process-wide registry from settings.

    memory: process-local store, in-process writer lock only.
    sql: ticker_records table (created if missing), Redis writer lock
         when sql_shared_write_lock is set.
    redis: shared hash plus a Redis writer lock across processes.
    """
    write_lock = None

    if settings.store_backend == "sql":
        from ticker_registry.core.database import init_db
        from ticker_registry.stores.sql import SqlTickerStore

        await init_db()
        store = SqlTickerStore()
        if settings.sql_shared_write_lock:
            from ticker_registry.stores.redis import RedisWriteLock

            write_lock = RedisWriteLock()
    elif settings.store_backend == "redis":
        from ticker_registry.stores.redis import RedisTickerStore, RedisWriteLock

        store = RedisTickerStore()
        write_lock = RedisWriteLock()
    else:
        from ticker_registry.stores.memory import MemoryTickerStore

        store = MemoryTickerStore()

    mirror = None
    if settings.mirror_url:
        from ticker_registry.mirror.http import HttpTickerMirror

        mirror = HttpTickerMirror(
            settings.mirror_url,
            api_key=settings.mirror_api_key,
            timeout=settings.mirror_timeout_seconds
        )
        logger.info(f"On-chain mirror enabled: {settings.mirror_url}")

    logger.info(f"Using {settings.store_backend} ticker store")
    return RegistryService(
        store=store,
        config=settings.registry_config(),
        mirror=mirror,
        write_lock=write_lock
    )


def get_registry(request: Request) -> RegistryService:
    """Dependency returning the registry built at startup."""
    return request.app.state.registry
