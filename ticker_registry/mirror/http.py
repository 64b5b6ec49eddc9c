"""HTTP relay implementation of the on-chain ticker mirror."""
import httpx
from typing import Optional
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log
)
import logging
from ticker_registry.mirror import TickerMirror, MirrorError
from ticker_registry.services.records import TickerRecord


logger = logging.getLogger(__name__)


class HttpTickerMirror(TickerMirror):
    """Talks to a relay service that submits register_ticker transactions."""

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self.client = httpx.AsyncClient(timeout=timeout, headers=headers)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    async def _post(self, url: str, payload: dict) -> httpx.Response:
        """POST with retry for timeouts and connection errors only."""
        return await self.client.post(url, json=payload)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    async def _get(self, url: str) -> httpx.Response:
        """GET with retry for timeouts and connection errors only."""
        return await self.client.get(url)

    async def register(self, record: TickerRecord) -> str:
        """
        Submit a ticker registration to the relay.

        The relay answers with {"signature": "..."} once the transaction is confirmed.
        """
        url = f"{self.base_url}/tickers"
        payload = {
            "symbol": record.symbol,
            "collectionName": record.collection_name,
            "collectionAddress": record.collection_address,
            "creator": record.creator_wallet
        }

        try:
            response = await self._post(url, payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 409:
                raise MirrorError(f"Ticker {record.symbol} is already registered on-chain")
            raise MirrorError(f"Mirror relay error: {str(e)}")
        except httpx.TimeoutException as e:
            raise MirrorError(f"Mirror relay timeout after retries: {str(e)}")
        except httpx.HTTPError as e:
            raise MirrorError(f"Mirror relay connection error: {str(e)}")
        except ValueError as e:
            raise MirrorError(f"Mirror relay returned invalid JSON: {str(e)}")

        signature = data.get("signature")
        if not signature:
            raise MirrorError(f"Mirror relay returned no signature for {record.symbol}")

        logger.info(f"Anchored ticker {record.symbol} on-chain: {signature}")
        return signature

    async def lookup(self, symbol: str) -> Optional[dict]:
        """Fetch the on-chain ticker entry through the relay."""
        url = f"{self.base_url}/tickers/{symbol.upper().strip()}"

        try:
            response = await self._get(url)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise MirrorError(f"Mirror relay error: {str(e)}")
        except httpx.HTTPError as e:
            raise MirrorError(f"Mirror relay connection error: {str(e)}")
        except ValueError as e:
            raise MirrorError(f"Mirror relay returned invalid JSON: {str(e)}")

    async def close(self) -> None:
        await self.client.aclose()
