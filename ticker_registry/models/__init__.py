"""Models package initialization."""
from ticker_registry.models.ticker import TickerEntry

__all__ = [
    "TickerEntry"
]
