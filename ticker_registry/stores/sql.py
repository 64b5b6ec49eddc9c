"""SQLAlchemy-backed ticker store."""
from typing import List, Optional
from sqlalchemy import select, delete, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import logging
from ticker_registry.models import TickerEntry
from ticker_registry.services.records import MirrorStatus, TickerRecord, TickerStatus
from ticker_registry.stores import StorageUnavailableError, TickerStore


logger = logging.getLogger(__name__)


def entry_to_record(entry: TickerEntry) -> TickerRecord:
    """Convert an ORM row to a registry record."""
    return TickerRecord(
        symbol=entry.symbol,
        collection_name=entry.collection_name,
        collection_address=entry.collection_address or "",
        creator_wallet=entry.creator_wallet,
        registered_at=int(entry.registered_at),
        status=TickerStatus(entry.status),
        mirror_status=MirrorStatus(entry.mirror_status) if entry.mirror_status else None,
        mirror_signature=entry.mirror_signature
    )


def record_to_entry(record: TickerRecord) -> TickerEntry:
    """Convert a registry record to an ORM row."""
    return TickerEntry(
        symbol=record.symbol,
        collection_name=record.collection_name,
        collection_address=record.collection_address,
        creator_wallet=record.creator_wallet,
        registered_at=record.registered_at,
        status=record.status.value,
        mirror_status=record.mirror_status.value if record.mirror_status else None,
        mirror_signature=record.mirror_signature
    )


class SqlTickerStore(TickerStore):
    """Ticker store over the ticker_records table.

    Each call runs in its own session and commits immediately.
    """

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        if session_factory is None:
            from ticker_registry.core.database import AsyncSessionLocal
            session_factory = AsyncSessionLocal
        self.session_factory = session_factory

    async def get(self, symbol: str) -> Optional[TickerRecord]:
        symbol = self._require_key(symbol)
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(TickerEntry).where(TickerEntry.symbol == symbol)
                )
                entry = result.scalar_one_or_none()
                return entry_to_record(entry) if entry else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to read ticker {symbol}: {e}", exc_info=True)
            raise StorageUnavailableError(f"Database error: {str(e)}") from e

    async def set(self, symbol: str, record: TickerRecord) -> None:
        symbol = self._require_key(symbol)
        try:
            async with self.session_factory() as db:
                await db.merge(record_to_entry(record))
                await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to write ticker {symbol}: {e}", exc_info=True)
            raise StorageUnavailableError(f"Database error: {str(e)}") from e

    async def delete(self, symbol: str) -> bool:
        symbol = self._require_key(symbol)
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    delete(TickerEntry).where(TickerEntry.symbol == symbol)
                )
                await db.commit()
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete ticker {symbol}: {e}", exc_info=True)
            raise StorageUnavailableError(f"Database error: {str(e)}") from e

    async def values(self) -> List[TickerRecord]:
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(TickerEntry).order_by(TickerEntry.registered_at)
                )
                return [entry_to_record(entry) for entry in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list tickers: {e}", exc_info=True)
            raise StorageUnavailableError(f"Database error: {str(e)}") from e

    async def ping(self) -> bool:
        try:
            async with self.session_factory() as db:
                await db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}", exc_info=True)
            raise StorageUnavailableError(f"Database error: {str(e)}") from e
