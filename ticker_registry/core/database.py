"""Database setup with async SQLAlchemy for the SQL ticker store."""
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from ticker_registry.core.config import settings
import logging
import re

logger = logging.getLogger(__name__)


# Mask password in database URL for logging
def mask_db_url(url: str) -> str:
    """Mask password in database URL for safe logging."""
    return re.sub(r'://([^:]+):([^@]+)@', r'://\1:****@', url)


def build_engine_args(database_url: str) -> dict:
    """Engine keyword arguments for a database URL.

    SQLite does not take the connection pool sizing used for server databases.
    """
    engine_args = {
        "echo": settings.log_level == "DEBUG",  # Log all SQL if DEBUG
    }
    if not database_url.startswith("sqlite"):
        engine_args.update({
            "pool_pre_ping": True,  # Verify connections before using
            "pool_size": 10,  # Maintain 10 connections in pool
            "max_overflow": 20,  # Allow up to 20 additional connections
            "pool_timeout": 30,  # Wait up to 30s for connection
            "pool_recycle": 3600,  # Recycle connections every hour
        })
    return engine_args


logger.info(f"Connecting to database: {mask_db_url(settings.database_url)}")

# Create async engine
engine = create_async_engine(
    settings.database_url,
    **build_engine_args(settings.database_url)
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


async def init_db(bind=None):
    """Initialize database tables."""
    logger.info("Initializing database tables...")

    # Import models so they are registered on Base.metadata
    from ticker_registry import models  # noqa: F401

    target = bind or engine
    try:
        async with target.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("✓ Database tables initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database tables: {str(e)}", exc_info=True)
        logger.debug(f"Database URL (masked): {mask_db_url(settings.database_url)}")
        raise
