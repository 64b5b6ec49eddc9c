"""Health check endpoints for the API and the ticker store."""
from fastapi import APIRouter, Depends
import logging

from ticker_registry.api.dependencies import get_registry
from ticker_registry.services.ticker_service import RegistryService
from ticker_registry.stores import StorageUnavailableError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "ticker-registry-api"}


@router.get("/health/store")
async def check_store_health(registry: RegistryService = Depends(get_registry)):
    """
    Ticker store health check.

    Returns the store backend, reachability and record count.
    """
    backend = type(registry.store).__name__

    try:
        await registry.store.ping()
        stats = await registry.get_stats()
        return {
            "status": "healthy",
            "store": backend,
            "records": stats.total_registered
        }
    except StorageUnavailableError as e:
        logger.error(f"Store health check failed: {e}")
        return {
            "status": "unhealthy",
            "store": backend,
            "error": str(e)
        }
