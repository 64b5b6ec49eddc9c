"""Abstract interface for ticker registry stores."""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from ticker_registry.services.records import TickerRecord


class StorageUnavailableError(Exception):
    """Exception raised when the backing store cannot be reached."""
    pass


class TickerStore(ABC):
    """Key-value store of ticker records keyed by normalized symbol.

    Holds no business rules. Callers pass already-normalized, non-empty keys.
    """

    @abstractmethod
    async def get(self, symbol: str) -> Optional[TickerRecord]:
        """Return the record stored under symbol, or None."""
        pass

    @abstractmethod
    async def set(self, symbol: str, record: TickerRecord) -> None:
        """Insert or replace the record stored under symbol."""
        pass

    @abstractmethod
    async def delete(self, symbol: str) -> bool:
        """Remove the record under symbol. Returns True if one was removed."""
        pass

    @abstractmethod
    async def values(self) -> List[TickerRecord]:
        """All stored records."""
        pass

    async def entries(self) -> List[Tuple[str, TickerRecord]]:
        """All (symbol, record) pairs."""
        return [(record.symbol, record) for record in await self.values()]

    async def ping(self) -> bool:
        """Check that the store is reachable.

        Raises:
            StorageUnavailableError: If the backing service is down
        """
        return True

    @staticmethod
    def _require_key(symbol: str) -> str:
        if not symbol:
            raise ValueError("Ticker store key cannot be empty")
        return symbol
