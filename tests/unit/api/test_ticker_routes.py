"""Unit tests for the ticker registry API routes.

Requests go through the ASGI app with the registry dependency overridden.
"""
import pytest
from unittest.mock import AsyncMock
import httpx

from ticker_registry.api.dependencies import get_registry
from ticker_registry.api.main import app
from ticker_registry.services.records import MirrorStatus, TickerStatus
from ticker_registry.services.ticker_service import RegistryService
from ticker_registry.stores import StorageUnavailableError
from tests.conftest import TEN_MINUTES_MS


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
async def client(registry):
    """HTTP client bound to the app with the test registry."""
    app.dependency_overrides[get_registry] = lambda: registry
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


# ============================================================================
# Tests for GET /api/ticker/check/{symbol}
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
class TestCheckTicker:
    """Test check endpoint."""

    async def test_available(self, client):
        """✅ Available ticker."""
        response = await client.get("/api/ticker/check/moon")

        assert response.status_code == 200
        assert response.json() == {"symbol": "MOON", "available": True, "reason": None}

    async def test_reserved_word(self, client):
        """✅ Reserved word reason."""
        response = await client.get("/api/ticker/check/SOL")

        data = response.json()
        assert data["available"] is False
        assert data["reason"] == 'Ticker "SOL" is reserved'

    async def test_storage_unavailable(self, clock):
        """✅ Storage outage → 503, not 'taken'."""
        store = AsyncMock()
        store.get.side_effect = StorageUnavailableError("down")
        registry = RegistryService(store=store, clock=clock)
        app.dependency_overrides[get_registry] = lambda: registry
        try:
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
                response = await http_client.get("/api/ticker/check/MOON")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        assert response.json() == {"detail": "Ticker registry storage unavailable"}


# ============================================================================
# Tests for validate / reserve / cancel / register
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
class TestCommands:
    """Test command endpoints."""

    async def test_validate(self, client):
        """✅ Format-only check."""
        response = await client.get("/api/ticker/validate/1abc")

        assert response.json() == {
            "symbol": "1ABC",
            "valid": False,
            "message": "Ticker should not start with a number"
        }

    async def test_reserve(self, client, store):
        """✅ Reservation created."""
        response = await client.post(
            "/api/ticker/reserve",
            json={"symbol": "pepe", "creatorWallet": "W1"}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": 'Ticker "PEPE" reserved for 10 minutes'}
        assert (await store.get("PEPE")).status == TickerStatus.RESERVED

    async def test_reserve_missing_wallet(self, client):
        """✅ Missing creatorWallet → 422."""
        response = await client.post("/api/ticker/reserve", json={"symbol": "PEPE"})

        assert response.status_code == 422

    async def test_reserve_taken(self, client):
        """✅ Business failure is 200 with success=false."""
        await client.post("/api/ticker/reserve", json={"symbol": "PEPE", "creatorWallet": "W1"})

        response = await client.post("/api/ticker/reserve", json={"symbol": "PEPE", "creatorWallet": "W2"})

        assert response.status_code == 200
        assert response.json()["success"] is False

    async def test_cancel(self, client, store):
        """✅ Owner cancels, others cannot."""
        await client.post("/api/ticker/reserve", json={"symbol": "PEPE", "creatorWallet": "W1"})

        denied = await client.delete("/api/ticker/reserve/PEPE", params={"creatorWallet": "W2"})
        allowed = await client.delete("/api/ticker/reserve/pepe", params={"creatorWallet": "W1"})

        assert denied.json() == {"success": False}
        assert allowed.json() == {"success": True}
        assert await store.get("PEPE") is None

    async def test_cancel_requires_wallet(self, client, store):
        """✅ Missing creatorWallet query → 422, reservation kept."""
        await client.post("/api/ticker/reserve", json={"symbol": "PEPE", "creatorWallet": "W1"})

        response = await client.delete("/api/ticker/reserve/PEPE")

        assert response.status_code == 422
        assert await store.get("PEPE") is not None

    async def test_register(self, client, store):
        """✅ Registration writes an active record."""
        response = await client.post(
            "/api/ticker/register",
            json={
                "symbol": "PEPE",
                "collectionName": "Pepe Collection",
                "collectionAddress": "addr123",
                "creatorWallet": "W1"
            }
        )

        assert response.json() == {"success": True, "message": 'Ticker "PEPE" registered successfully'}
        assert (await store.get("PEPE")).status == TickerStatus.ACTIVE

    async def test_register_anchors_when_mirror_configured(self, client, registry, store):
        """✅ Background task anchors the ticker on-chain."""
        mirror = AsyncMock()
        mirror.register.return_value = "sig-abc"
        registry.mirror = mirror

        response = await client.post(
            "/api/ticker/register",
            json={
                "symbol": "PEPE",
                "collectionName": "Pepe Collection",
                "collectionAddress": "addr123",
                "creatorWallet": "W1"
            }
        )

        assert response.json()["success"] is True
        record = await store.get("PEPE")
        assert record.mirror_status == MirrorStatus.CONFIRMED
        assert record.mirror_signature == "sig-abc"


# ============================================================================
# Tests for info / search / all / stats
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
class TestQueries:
    """Test query endpoints."""

    @pytest.fixture
    async def seeded(self, client, registry, clock):
        await registry.register_ticker("MOON", "Moon Cats", "a1", "W1")
        clock.advance(1000)
        await registry.reserve_ticker("ZEBRA", "W2")
        return client

    async def test_info(self, seeded):
        """✅ Record in camelCase."""
        response = await seeded.get("/api/ticker/info/moon")

        data = response.json()
        assert response.status_code == 200
        assert data["symbol"] == "MOON"
        assert data["collectionName"] == "Moon Cats"
        assert data["status"] == "active"
        assert "expiresInMs" not in data

    async def test_info_reserved_has_countdown(self, seeded):
        """✅ Reserved records expose time left."""
        response = await seeded.get("/api/ticker/info/ZEBRA")

        assert response.json()["expiresInMs"] == TEN_MINUTES_MS

    async def test_info_not_found(self, seeded):
        """✅ Unknown → 404."""
        response = await seeded.get("/api/ticker/info/NOPE")

        assert response.status_code == 404

    async def test_search(self, seeded):
        """✅ Search response shape."""
        response = await seeded.get("/api/ticker/search", params={"q": "cats"})

        data = response.json()
        assert data["query"] == "cats"
        assert data["count"] == 1
        assert data["results"][0]["symbol"] == "MOON"

    async def test_search_empty_query(self, seeded):
        """✅ Empty query → everything, newest first."""
        response = await seeded.get("/api/ticker/search")

        assert [r["symbol"] for r in response.json()["results"]] == ["ZEBRA", "MOON"]

    async def test_all(self, seeded):
        """✅ Tickers plus stats."""
        response = await seeded.get("/api/ticker/all")

        data = response.json()
        assert [t["symbol"] for t in data["tickers"]] == ["ZEBRA", "MOON"]
        assert data["stats"]["totalRegistered"] == 2
        assert data["stats"]["activeTickers"] == 1
        assert data["stats"]["reservedTickers"] == 1
        assert data["stats"]["inactiveTickers"] == 0

    async def test_stats(self, seeded, registry):
        """✅ Stats endpoint."""
        response = await seeded.get("/api/ticker/stats")

        assert response.json()["reservedWordCount"] == len(registry.reserved_words)


# ============================================================================
# Tests for health endpoints
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
class TestHealth:
    """Test health endpoints."""

    async def test_health(self, client):
        """✅ Basic health."""
        response = await client.get("/health")

        assert response.json()["status"] == "healthy"

    async def test_store_health(self, client, registry):
        """✅ Store reachable."""
        await registry.register_ticker("MOON", "Moon", "a1", "W1")

        response = await client.get("/health/store")

        assert response.json() == {"status": "healthy", "store": "MemoryTickerStore", "records": 1}

    async def test_store_unhealthy(self, client, registry):
        """✅ Store down → unhealthy payload."""
        registry.store = AsyncMock()
        registry.store.ping.side_effect = StorageUnavailableError("down")

        response = await client.get("/health/store")

        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["error"] == "down"
