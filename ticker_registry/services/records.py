"""Data models for ticker registry records and operation results."""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional


class TickerStatus(str, Enum):
    """Lifecycle state of a ticker record."""
    ACTIVE = "active"
    RESERVED = "reserved"
    INACTIVE = "inactive"


class MirrorStatus(str, Enum):
    """State of the on-chain anchor for an active ticker."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass
class TickerRecord:
    """One claimed or reserved ticker, keyed by its normalized symbol."""
    symbol: str
    collection_name: str
    collection_address: str
    creator_wallet: str
    registered_at: int  # ms since epoch
    status: TickerStatus
    mirror_status: Optional[MirrorStatus] = None
    mirror_signature: Optional[str] = None

    def is_expired(self, now: int, ttl_ms: int) -> bool:
        """True for a reservation older than the reservation window."""
        return self.status == TickerStatus.RESERVED and (now - self.registered_at) > ttl_ms

    def to_dict(self) -> dict:
        """Serialize to the camelCase JSON shape used by the HTTP API."""
        return {
            "symbol": self.symbol,
            "collectionName": self.collection_name,
            "collectionAddress": self.collection_address,
            "creatorWallet": self.creator_wallet,
            "registeredAt": self.registered_at,
            "status": self.status.value,
            "mirrorStatus": self.mirror_status.value if self.mirror_status else None,
            "mirrorSignature": self.mirror_signature
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TickerRecord":
        """Rebuild a record from to_dict() output."""
        mirror_status = data.get("mirrorStatus")
        return cls(
            symbol=data["symbol"],
            collection_name=data["collectionName"],
            collection_address=data.get("collectionAddress", ""),
            creator_wallet=data["creatorWallet"],
            registered_at=int(data["registeredAt"]),
            status=TickerStatus(data["status"]),
            mirror_status=MirrorStatus(mirror_status) if mirror_status else None,
            mirror_signature=data.get("mirrorSignature")
        )


@dataclass
class ValidationResult:
    """Outcome of the ticker format rules."""
    valid: bool
    message: Optional[str] = None


@dataclass
class AvailabilityResult:
    """Outcome of an availability check."""
    available: bool
    reason: Optional[str] = None


@dataclass
class OperationResult:
    """Outcome of a register, reserve or anchor command."""
    success: bool
    message: str


@dataclass
class RegistryStats:
    """Aggregate counts over the registry."""
    total_registered: int
    active_tickers: int
    reserved_tickers: int
    inactive_tickers: int
    reserved_word_count: int

    def to_dict(self) -> dict:
        data = asdict(self)
        return {
            "totalRegistered": data["total_registered"],
            "activeTickers": data["active_tickers"],
            "reservedTickers": data["reserved_tickers"],
            "inactiveTickers": data["inactive_tickers"],
            "reservedWordCount": data["reserved_word_count"]
        }
