"""Collection ticker registry service."""
import asyncio
import logging
import re
from contextlib import asynccontextmanager
from typing import List, Optional
from ticker_registry.core.config import RegistryConfig
from ticker_registry.mirror import MirrorError, TickerMirror
from ticker_registry.services.records import (
    AvailabilityResult,
    MirrorStatus,
    OperationResult,
    RegistryStats,
    TickerRecord,
    TickerStatus,
    ValidationResult
)
from ticker_registry.services.reserved_words import ReservedWordList
from ticker_registry.services.similarity import is_too_similar
from ticker_registry.stores import TickerStore
from ticker_registry.stores.memory import MemoryTickerStore
from ticker_registry.utils.time import Clock, now_ms


logger = logging.getLogger(__name__)

# Ticker characters after uppercasing
TICKER_CHARS_PATTERN = re.compile(r'^[A-Z0-9]+$')


def normalize_symbol(symbol: Optional[str]) -> str:
    """Canonical form of a ticker: trimmed and uppercased."""
    return (symbol or "").strip().upper()


def validate_format(symbol: Optional[str], config: Optional[RegistryConfig] = None) -> ValidationResult:
    """
    Check a ticker against the format rules. First failing rule wins.

    Args:
        symbol: Raw ticker as typed by the user
        config: Registry rules (length window); defaults if omitted

    Returns:
        ValidationResult with the failure message, if any
    """
    config = config or RegistryConfig()
    normalized = normalize_symbol(symbol)

    if not normalized:
        return ValidationResult(valid=False, message="Ticker symbol is required")

    if len(normalized) < config.min_length:
        return ValidationResult(
            valid=False,
            message=f"Ticker must be at least {config.min_length} characters long"
        )

    if len(normalized) > config.max_length:
        return ValidationResult(
            valid=False,
            message=f"Ticker must be {config.max_length} characters or less"
        )

    if not TICKER_CHARS_PATTERN.match(normalized):
        return ValidationResult(valid=False, message="Ticker can only contain letters and numbers")

    if normalized[0].isdigit():
        return ValidationResult(valid=False, message="Ticker should not start with a number")

    return ValidationResult(valid=True)


class RegistryService:
    """Global namespace allocator for collection tickers.

    One instance per process, built at startup and shared by the API and the
    expiry sweep. Mutations are serialized through a single writer lock;
    reads run unsynchronized and may see a reservation that expired but has
    not been swept yet (reported as unavailable).
    """

    def __init__(
        self,
        store: Optional[TickerStore] = None,
        config: Optional[RegistryConfig] = None,
        reserved_words: Optional[ReservedWordList] = None,
        clock: Optional[Clock] = None,
        mirror: Optional[TickerMirror] = None,
        write_lock=None
    ):
        self.store = store or MemoryTickerStore()
        self.config = config or RegistryConfig()
        self.reserved_words = reserved_words or ReservedWordList()
        self.clock = clock or now_ms
        self.mirror = mirror
        # Optional cross-process lock (e.g. RedisWriteLock), taken inside the local one
        self.write_lock = write_lock
        self._lock = asyncio.Lock()

        logger.info(
            f"Ticker registry initialized with {len(self.reserved_words)} reserved tickers "
            f"(ttl={self.config.reservation_ttl_ms}ms, "
            f"similarity>{self.config.similarity_threshold})"
        )

    @asynccontextmanager
    async def _writer(self):
        """Serialize a mutation against every other mutation."""
        async with self._lock:
            if self.write_lock is None:
                yield
            else:
                async with self.write_lock:
                    yield

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def validate_format(self, symbol: Optional[str]) -> ValidationResult:
        return validate_format(symbol, self.config)

    def is_reserved_word(self, symbol: str) -> bool:
        return self.reserved_words.is_reserved(normalize_symbol(symbol))

    async def find_similar_tickers(self, symbol: str) -> List[str]:
        """Existing tickers confusingly similar to symbol, in store order."""
        target = normalize_symbol(symbol)
        threshold = self.config.similarity_threshold

        return [
            existing
            for existing, _ in await self.store.entries()
            if is_too_similar(target, existing, threshold)
        ]

    async def check_availability(self, symbol: Optional[str]) -> AvailabilityResult:
        """
        Decide whether a ticker can be claimed right now.

        Checks, in order: format, reserved words, exact match (any status,
        including unswept reservations), similarity to every existing ticker.

        Raises:
            StorageUnavailableError: If the store cannot be read
        """
        validation = self.validate_format(symbol)
        if not validation.valid:
            return AvailabilityResult(available=False, reason=validation.message)

        normalized = normalize_symbol(symbol)

        if self.reserved_words.is_reserved(normalized):
            return AvailabilityResult(available=False, reason=f'Ticker "{normalized}" is reserved')

        existing = await self.store.get(normalized)
        if existing is not None:
            return AvailabilityResult(
                available=False,
                reason=f'Ticker "{normalized}" is already used by "{existing.collection_name}"'
            )

        similar = await self.find_similar_tickers(normalized)
        if similar:
            return AvailabilityResult(
                available=False,
                reason=f'Ticker "{normalized}" is too similar to existing tickers: {", ".join(similar)}'
            )

        return AvailabilityResult(available=True)

    async def get_ticker_info(self, symbol: str) -> Optional[TickerRecord]:
        normalized = normalize_symbol(symbol)
        if not normalized:
            return None
        return await self.store.get(normalized)

    async def get_all_tickers(self) -> List[TickerRecord]:
        """All records, most recent first."""
        records = await self.store.values()
        return sorted(records, key=lambda r: r.registered_at, reverse=True)

    async def search_tickers(self, pattern: Optional[str]) -> List[TickerRecord]:
        """Case-insensitive substring match on symbol or collection name, most recent first."""
        needle = (pattern or "").upper()

        matches = [
            record
            for record in await self.store.values()
            if needle in record.symbol.upper() or needle in record.collection_name.upper()
        ]
        return sorted(matches, key=lambda r: r.registered_at, reverse=True)

    async def get_stats(self) -> RegistryStats:
        records = await self.store.values()
        return RegistryStats(
            total_registered=len(records),
            active_tickers=sum(1 for r in records if r.status == TickerStatus.ACTIVE),
            reserved_tickers=sum(1 for r in records if r.status == TickerStatus.RESERVED),
            inactive_tickers=sum(1 for r in records if r.status == TickerStatus.INACTIVE),
            reserved_word_count=len(self.reserved_words)
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def register_ticker(
        self,
        symbol: str,
        collection_name: str,
        collection_address: str,
        creator_wallet: str
    ) -> OperationResult:
        """
        Permanently claim a ticker for a collection.

        A reservation of the same symbol held by the same wallet is converted
        to an active registration; any other existing claim blocks it.

        Raises:
            StorageUnavailableError: If the store cannot be read or written
        """
        normalized = normalize_symbol(symbol)

        async with self._writer():
            if self.config.sweep_on_write:
                await self._sweep_expired(self.clock())

            availability = await self._check_claim(normalized, creator_wallet)
            if not availability.available:
                logger.info(f"Rejected registration of {normalized!r}: {availability.reason}")
                return OperationResult(success=False, message=availability.reason or "Ticker not available")

            record = TickerRecord(
                symbol=normalized,
                collection_name=collection_name,
                collection_address=collection_address,
                creator_wallet=creator_wallet,
                registered_at=self.clock(),
                status=TickerStatus.ACTIVE
            )
            await self.store.set(normalized, record)

        logger.info(f"✅ Registered ticker: {normalized} for collection \"{collection_name}\"")
        return OperationResult(success=True, message=f'Ticker "{normalized}" registered successfully')

    async def reserve_ticker(self, symbol: str, creator_wallet: str) -> OperationResult:
        """
        Hold a ticker for the reservation window while a collection is being created.

        Raises:
            StorageUnavailableError: If the store cannot be read or written
        """
        normalized = normalize_symbol(symbol)

        async with self._writer():
            if self.config.sweep_on_write:
                await self._sweep_expired(self.clock())

            availability = await self.check_availability(normalized)
            if not availability.available:
                logger.info(f"Rejected reservation of {normalized!r}: {availability.reason}")
                return OperationResult(success=False, message=availability.reason or "Ticker not available")

            record = TickerRecord(
                symbol=normalized,
                collection_name=f"RESERVED_{normalized}",
                collection_address="",
                creator_wallet=creator_wallet,
                registered_at=self.clock(),
                status=TickerStatus.RESERVED
            )
            await self.store.set(normalized, record)

        logger.info(f"🔒 Reserved ticker: {normalized} for wallet {creator_wallet}")
        return OperationResult(
            success=True,
            message=f'Ticker "{normalized}" reserved for {self.config.reservation_ttl_minutes} minutes'
        )

    async def cancel_reservation(self, symbol: str, creator_wallet: str) -> bool:
        """
        Release a reservation held by creator_wallet.

        Returns False without distinguishing a missing record, a non-reserved
        record or a different owner.
        """
        normalized = normalize_symbol(symbol)
        if not normalized:
            return False

        async with self._writer():
            record = await self.store.get(normalized)
            if (
                record is None
                or record.status != TickerStatus.RESERVED
                or record.creator_wallet != creator_wallet
            ):
                return False

            await self.store.delete(normalized)

        logger.info(f"❌ Cancelled reservation for ticker: {normalized}")
        return True

    async def cleanup_expired_reservations(self, now: Optional[int] = None) -> int:
        """
        Delete every reservation older than the reservation window.

        Args:
            now: Reference time in ms (defaults to the service clock)

        Returns:
            Number of reservations removed
        """
        if now is None:
            now = self.clock()

        async with self._writer():
            return await self._sweep_expired(now)

    async def anchor_on_chain(self, symbol: str) -> OperationResult:
        """
        Mirror an active registration to the on-chain registry.

        The local record is kept whatever the outcome; only its mirror fields change.
        """
        normalized = normalize_symbol(symbol)

        if self.mirror is None:
            return OperationResult(success=False, message="No on-chain mirror configured")

        record = await self.get_ticker_info(normalized)
        if record is None or record.status != TickerStatus.ACTIVE:
            return OperationResult(success=False, message=f'Ticker "{normalized}" is not an active registration')

        await self._update_mirror_state(normalized, MirrorStatus.PENDING, None)

        try:
            signature = await self.mirror.register(record)
        except MirrorError as e:
            logger.error(f"On-chain anchor failed for {normalized}: {e}")
            await self._update_mirror_state(normalized, MirrorStatus.FAILED, None)
            return OperationResult(success=False, message=f"On-chain registration failed: {str(e)}")
        except Exception:
            # Never leave the record pending
            logger.error(f"Unexpected error anchoring {normalized} on-chain", exc_info=True)
            await self._update_mirror_state(normalized, MirrorStatus.FAILED, None)
            raise

        await self._update_mirror_state(normalized, MirrorStatus.CONFIRMED, signature)
        return OperationResult(success=True, message=f'Ticker "{normalized}" anchored on-chain: {signature}')

    # ------------------------------------------------------------------
    # Internals (callers hold the writer lock where noted)
    # ------------------------------------------------------------------

    async def _check_claim(self, normalized: str, creator_wallet: str) -> AvailabilityResult:
        """Availability gate for register: lets a wallet finalize its own reservation."""
        validation = self.validate_format(normalized)
        if not validation.valid:
            return AvailabilityResult(available=False, reason=validation.message)

        existing = await self.store.get(normalized)
        # An expired reservation is no longer held, even by its creator
        if (
            existing is not None
            and existing.status == TickerStatus.RESERVED
            and existing.creator_wallet == creator_wallet
            and not existing.is_expired(self.clock(), self.config.reservation_ttl_ms)
        ):
            # Own reservation: re-check everything except the exact match on itself
            if self.reserved_words.is_reserved(normalized):
                return AvailabilityResult(available=False, reason=f'Ticker "{normalized}" is reserved')
            similar = [s for s in await self.find_similar_tickers(normalized) if s != normalized]
            if similar:
                return AvailabilityResult(
                    available=False,
                    reason=f'Ticker "{normalized}" is too similar to existing tickers: {", ".join(similar)}'
                )
            return AvailabilityResult(available=True)

        return await self.check_availability(normalized)

    async def _sweep_expired(self, now: int) -> int:
        """Remove expired reservations. Caller holds the writer lock."""
        removed = 0
        for symbol, record in await self.store.entries():
            if record.is_expired(now, self.config.reservation_ttl_ms):
                if await self.store.delete(symbol):
                    removed += 1
                    logger.info(f"🧹 Cleaned up expired reservation: {symbol}")
        return removed

    async def _update_mirror_state(
        self,
        normalized: str,
        status: MirrorStatus,
        signature: Optional[str]
    ) -> None:
        async with self._writer():
            record = await self.store.get(normalized)
            if record is None:
                return
            record.mirror_status = status
            record.mirror_signature = signature
            await self.store.set(normalized, record)
