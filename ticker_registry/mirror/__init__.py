"""Abstract interface for the on-chain ticker registry mirror."""
from abc import ABC, abstractmethod
from typing import Optional
from ticker_registry.services.records import TickerRecord


class TickerMirror(ABC):
    """Remote registry that anchors active tickers on-chain."""

    @abstractmethod
    async def register(self, record: TickerRecord) -> str:
        """
        Anchor an active ticker on-chain.

        Args:
            record: Active ticker record

        Returns:
            Transaction signature or receipt identifier

        Raises:
            MirrorError: If the remote call fails
        """
        pass

    @abstractmethod
    async def lookup(self, symbol: str) -> Optional[dict]:
        """Fetch the on-chain entry for a symbol, or None if absent."""
        pass

    async def close(self) -> None:
        pass


class MirrorError(Exception):
    """Exception raised when the on-chain mirror call fails."""
    pass
