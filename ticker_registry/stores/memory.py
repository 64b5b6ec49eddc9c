"""Process-local ticker store."""
from typing import Dict, List, Optional, Tuple
from ticker_registry.services.records import TickerRecord
from ticker_registry.stores import TickerStore


class MemoryTickerStore(TickerStore):
    """Insertion-ordered in-memory store. Lives as long as the process."""

    def __init__(self):
        self._records: Dict[str, TickerRecord] = {}

    async def get(self, symbol: str) -> Optional[TickerRecord]:
        return self._records.get(self._require_key(symbol))

    async def set(self, symbol: str, record: TickerRecord) -> None:
        self._records[self._require_key(symbol)] = record

    async def delete(self, symbol: str) -> bool:
        return self._records.pop(self._require_key(symbol), None) is not None

    async def values(self) -> List[TickerRecord]:
        return list(self._records.values())

    async def entries(self) -> List[Tuple[str, TickerRecord]]:
        return list(self._records.items())
