"""Redis-backed ticker store and cross-process writer lock."""
import asyncio
import json
import logging
import uuid
from typing import List, Optional
from redis.exceptions import RedisError
from ticker_registry.core.redis import get_redis
from ticker_registry.services.records import TickerRecord
from ticker_registry.stores import StorageUnavailableError, TickerStore


logger = logging.getLogger(__name__)

RECORDS_KEY = "ticker_registry:records"
WRITE_LOCK_KEY = "ticker_registry:write_lock"


class RedisTickerStore(TickerStore):
    """All records in one Redis hash: field = symbol, value = JSON record."""

    def __init__(self, redis=None, key: str = RECORDS_KEY):
        self.redis = redis
        self.key = key
        self._lock = asyncio.Lock()

    async def _get_redis(self):
        """Get Redis connection."""
        if self.redis is None:
            async with self._lock:
                if self.redis is None:
                    self.redis = await get_redis()
        return self.redis

    async def get(self, symbol: str) -> Optional[TickerRecord]:
        symbol = self._require_key(symbol)
        redis = await self._get_redis()
        try:
            raw = await redis.hget(self.key, symbol)
        except RedisError as e:
            logger.error(f"Failed to read ticker {symbol}: {e}", exc_info=True)
            raise StorageUnavailableError(f"Redis error: {str(e)}") from e
        return TickerRecord.from_dict(json.loads(raw)) if raw else None

    async def set(self, symbol: str, record: TickerRecord) -> None:
        symbol = self._require_key(symbol)
        redis = await self._get_redis()
        try:
            await redis.hset(self.key, symbol, json.dumps(record.to_dict()))
        except RedisError as e:
            logger.error(f"Failed to write ticker {symbol}: {e}", exc_info=True)
            raise StorageUnavailableError(f"Redis error: {str(e)}") from e

    async def delete(self, symbol: str) -> bool:
        symbol = self._require_key(symbol)
        redis = await self._get_redis()
        try:
            return await redis.hdel(self.key, symbol) > 0
        except RedisError as e:
            logger.error(f"Failed to delete ticker {symbol}: {e}", exc_info=True)
            raise StorageUnavailableError(f"Redis error: {str(e)}") from e

    async def values(self) -> List[TickerRecord]:
        redis = await self._get_redis()
        try:
            raw_records = await redis.hgetall(self.key)
        except RedisError as e:
            logger.error(f"Failed to list tickers: {e}", exc_info=True)
            raise StorageUnavailableError(f"Redis error: {str(e)}") from e
        records = [TickerRecord.from_dict(json.loads(raw)) for raw in raw_records.values()]
        return sorted(records, key=lambda r: r.registered_at)

    async def ping(self) -> bool:
        redis = await self._get_redis()
        try:
            return bool(await redis.ping())
        except RedisError as e:
            logger.error(f"Redis ping failed: {e}", exc_info=True)
            raise StorageUnavailableError(f"Redis error: {str(e)}") from e


class RedisWriteLock:
    """Async context manager serializing registry writes across processes.

    Uses SET NX with an expiry so a crashed holder cannot block writers forever.
    """

    def __init__(
        self,
        redis=None,
        key: str = WRITE_LOCK_KEY,
        timeout_seconds: int = 5,
        max_retries: int = 50,
        retry_delay: float = 0.1
    ):
        self.redis = redis
        self.key = key
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._token: Optional[str] = None

    async def _get_redis(self):
        if self.redis is None:
            self.redis = await get_redis()
        return self.redis

    async def __aenter__(self):
        redis = await self._get_redis()
        token = uuid.uuid4().hex

        try:
            for attempt in range(self.max_retries):
                acquired = await redis.set(self.key, token, nx=True, ex=self.timeout_seconds)
                if acquired:
                    self._token = token
                    return self
                await asyncio.sleep(self.retry_delay)
        except RedisError as e:
            logger.error(f"Failed to acquire registry write lock: {e}", exc_info=True)
            raise StorageUnavailableError(f"Redis error: {str(e)}") from e

        raise StorageUnavailableError(
            f"Could not acquire registry write lock after {self.max_retries} attempts"
        )

    async def __aexit__(self, exc_type, exc, tb):
        redis = await self._get_redis()
        try:
            # Only release a lock we still own
            if await redis.get(self.key) == self._token:
                await redis.delete(self.key)
        except RedisError as e:
            logger.warning(f"Failed to release registry write lock: {e}")
        finally:
            self._token = None
        return False
