"""Unit tests for the SQL store's database setup."""
import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from ticker_registry import core
from ticker_registry.core import database
from ticker_registry.core.database import build_engine_args, init_db, mask_db_url


@pytest.mark.unit
class TestEngineHelpers:
    """Test URL masking and engine arguments."""

    def test_mask_password(self):
        """✅ Password hidden in logs."""
        url = "postgresql+asyncpg://registry:s3cret@db:5432/tickers"

        assert mask_db_url(url) == "postgresql+asyncpg://registry:****@db:5432/tickers"

    def test_sqlite_has_no_pool_sizing(self):
        """✅ SQLite URLs skip pool arguments."""
        args = build_engine_args("sqlite+aiosqlite:///./tickers.db")

        assert "pool_size" not in args

    def test_server_database_pool_sizing(self):
        """✅ Server URLs get pre-ping and pool sizing."""
        args = build_engine_args("postgresql+asyncpg://u:p@db/tickers")

        assert args["pool_pre_ping"] is True
        assert args["pool_size"] == 10

    def test_stores_open_their_own_sessions(self):
        """✅ No request-scoped session dependency is exposed."""
        assert not hasattr(database, "get_db")
        assert "get_db" not in core.__all__


@pytest.mark.unit
@pytest.mark.asyncio
async def test_init_db_creates_ticker_records():
    """✅ init_db creates the ticker_records table and its indexes."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    try:
        await init_db(bind=engine)

        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
            indexes = await conn.run_sync(
                lambda sync_conn: {ix["name"] for ix in inspect(sync_conn).get_indexes("ticker_records")}
            )
    finally:
        await engine.dispose()

    assert "ticker_records" in tables
    assert "ix_ticker_records_creator_wallet" in indexes
    assert "ix_ticker_records_status" in indexes
