"""Shared pytest fixtures for ticker registry tests."""
import pytest
from typing import Optional
from ticker_registry.core.config import RegistryConfig
from ticker_registry.services.records import TickerRecord, TickerStatus
from ticker_registry.services.ticker_service import RegistryService
from ticker_registry.stores.memory import MemoryTickerStore


# 2025-01-01T00:00:00Z
START_MS = 1735689600000

TEN_MINUTES_MS = 10 * 60 * 1000


class FakeClock:
    """Controllable clock returning ms since epoch."""

    def __init__(self, start: int = START_MS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


def create_record(
    symbol: str = "PEPE",
    collection_name: str = "Pepe Collection",
    collection_address: str = "addr123",
    creator_wallet: str = "W1",
    registered_at: int = START_MS,
    status: TickerStatus = TickerStatus.ACTIVE,
    mirror_signature: Optional[str] = None
) -> TickerRecord:
    """Factory function to create TickerRecord instances for testing."""
    return TickerRecord(
        symbol=symbol,
        collection_name=collection_name,
        collection_address=collection_address,
        creator_wallet=creator_wallet,
        registered_at=registered_at,
        status=status,
        mirror_signature=mirror_signature
    )


@pytest.fixture
def clock():
    """Fake clock starting at 2025-01-01T00:00:00Z."""
    return FakeClock()


@pytest.fixture
def store():
    """Empty in-memory ticker store."""
    return MemoryTickerStore()


@pytest.fixture
def registry_config():
    """Default registry rules."""
    return RegistryConfig()


@pytest.fixture
def registry(store, registry_config, clock):
    """Registry service over an in-memory store and a fake clock."""
    return RegistryService(store=store, config=registry_config, clock=clock)
