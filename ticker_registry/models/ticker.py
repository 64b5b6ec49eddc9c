"""Persisted ticker registry record."""
from sqlalchemy import Column, String, BigInteger
from ticker_registry.core.database import Base


class TickerEntry(Base):
    """One claimed or reserved collection ticker."""

    __tablename__ = "ticker_records"

    symbol = Column(String(10), primary_key=True)
    collection_name = Column(String, nullable=False)
    collection_address = Column(String, default="", nullable=False)
    creator_wallet = Column(String, nullable=False, index=True)
    registered_at = Column(BigInteger, nullable=False)  # ms since epoch
    status = Column(String, default="active", nullable=False, index=True)  # active, reserved, inactive
    mirror_status = Column(String, nullable=True)  # pending, confirmed, failed
    mirror_signature = Column(String, nullable=True)
