"""Ticker registry API routes."""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
import logging

from ticker_registry.api.dependencies import get_registry
from ticker_registry.services.records import TickerStatus
from ticker_registry.services.ticker_service import RegistryService, normalize_symbol
from ticker_registry.utils.time import remaining_ms

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/ticker", tags=["ticker"])


class ReserveTickerRequest(BaseModel):
    """Request to reserve a ticker."""
    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    creator_wallet: str = Field(alias="creatorWallet", min_length=1)


class RegisterTickerRequest(BaseModel):
    """Request to permanently register a ticker."""
    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    collection_name: str = Field(alias="collectionName", min_length=1)
    collection_address: str = Field(alias="collectionAddress", default="")
    creator_wallet: str = Field(alias="creatorWallet", min_length=1)


class OperationResponse(BaseModel):
    """Result of a registry command."""
    success: bool
    message: str


class AvailabilityResponse(BaseModel):
    """Ticker availability response."""
    symbol: str
    available: bool
    reason: Optional[str] = None


@router.get("/check/{symbol}", response_model=AvailabilityResponse)
async def check_ticker(symbol: str, registry: RegistryService = Depends(get_registry)):
    """Check whether a ticker can be claimed."""
    result = await registry.check_availability(symbol)

    return {
        "symbol": normalize_symbol(symbol),
        "available": result.available,
        "reason": result.reason
    }


@router.get("/validate/{symbol}")
async def validate_ticker(symbol: str, registry: RegistryService = Depends(get_registry)):
    """Check the format rules only (no store access)."""
    result = registry.validate_format(symbol)

    return {
        "symbol": normalize_symbol(symbol),
        "valid": result.valid,
        "message": result.message
    }


@router.post("/reserve", response_model=OperationResponse)
async def reserve_ticker(request: ReserveTickerRequest, registry: RegistryService = Depends(get_registry)):
    """Reserve a ticker for the reservation window."""
    result = await registry.reserve_ticker(request.symbol, request.creator_wallet)

    return {"success": result.success, "message": result.message}


@router.delete("/reserve/{symbol}")
async def cancel_reservation(
    symbol: str,
    creator_wallet: str = Query(alias="creatorWallet", min_length=1),
    registry: RegistryService = Depends(get_registry)
):
    """Cancel a reservation held by the given wallet."""
    cancelled = await registry.cancel_reservation(symbol, creator_wallet)

    return {"success": cancelled}


@router.post("/register", response_model=OperationResponse)
async def register_ticker(
    request: RegisterTickerRequest,
    background_tasks: BackgroundTasks,
    registry: RegistryService = Depends(get_registry)
):
    """
    Permanently register a ticker.

    When an on-chain mirror is configured, the anchor call runs after the
    response is sent; its outcome is recorded on the ticker.
    """
    result = await registry.register_ticker(
        request.symbol,
        request.collection_name,
        request.collection_address,
        request.creator_wallet
    )

    if result.success and registry.mirror is not None:
        background_tasks.add_task(registry.anchor_on_chain, request.symbol)

    return {"success": result.success, "message": result.message}


@router.get("/info/{symbol}")
async def get_ticker_info(symbol: str, registry: RegistryService = Depends(get_registry)):
    """Get the record for a ticker."""
    record = await registry.get_ticker_info(symbol)

    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Ticker {normalize_symbol(symbol)} not found"
        )

    data = record.to_dict()
    if record.status == TickerStatus.RESERVED:
        data["expiresInMs"] = remaining_ms(
            record.registered_at,
            registry.config.reservation_ttl_ms,
            registry.clock()
        )
    return data


@router.get("/search")
async def search_tickers(q: str = "", registry: RegistryService = Depends(get_registry)):
    """Search tickers by symbol or collection name."""
    results = await registry.search_tickers(q)

    return {
        "query": q,
        "results": [record.to_dict() for record in results],
        "count": len(results)
    }


@router.get("/all")
async def get_all_tickers(registry: RegistryService = Depends(get_registry)):
    """All registered and reserved tickers with aggregate stats."""
    tickers = await registry.get_all_tickers()
    stats = await registry.get_stats()

    return {
        "tickers": [record.to_dict() for record in tickers],
        "stats": stats.to_dict()
    }


@router.get("/stats")
async def get_stats(registry: RegistryService = Depends(get_registry)):
    """Aggregate registry counts."""
    stats = await registry.get_stats()
    return stats.to_dict()
