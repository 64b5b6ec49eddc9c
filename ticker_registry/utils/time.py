"""Time utilities for registry timestamps (milliseconds since epoch)."""
from datetime import datetime, timezone
from typing import Callable, Optional


# A clock returns the current time in ms since epoch
Clock = Callable[[], int]


def now_ms() -> int:
    """Current UTC time in milliseconds since epoch."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def ms_to_datetime(ms: int) -> datetime:
    """
    Convert a registry timestamp to an aware UTC datetime.

    Args:
        ms: Milliseconds since epoch

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


def remaining_ms(registered_at: int, ttl_ms: int, reference_ms: Optional[int] = None) -> int:
    """
    Milliseconds left before a reservation made at registered_at expires.

    Args:
        registered_at: Reservation timestamp (ms)
        ttl_ms: Reservation window (ms)
        reference_ms: Reference time (defaults to now)

    Returns:
        Remaining time, never negative
    """
    if reference_ms is None:
        reference_ms = now_ms()

    return max(0, registered_at + ttl_ms - reference_ms)
