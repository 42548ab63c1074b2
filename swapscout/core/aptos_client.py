"""
Aptos fullnode REST client for account transaction history.

Only the transport boundary lives here: one GET per call, failures classified
into TransportError subclasses. No retries; callers decide how to degrade.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import aiohttp

from ..config import ScoutConfig

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """A transaction-history fetch failed."""

    default_message = "Failed to fetch transactions. Please try again."

    def __init__(self, message: Optional[str] = None, address: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message or self.default_message)
        self.address = address
        self.status = status


class AddressNotFoundError(TransportError):
    """HTTP 404: unknown account or no history."""

    default_message = "Address not found or has no transactions"


class ServerError(TransportError):
    """HTTP 5xx: node-side failure, worth retrying later."""

    default_message = "Server error. Please try again later."


class NetworkError(TransportError):
    """The node could not be reached (connection failure or timeout)."""

    default_message = "Network error. Please check your connection."


class AptosClient:
    """Client for the Aptos fullnode REST API."""

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        api_key: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
        timeout_seconds: Optional[float] = None,
        rate_limit_delay: Optional[float] = None,
    ):
        """
        Initialize the Aptos client.

        Args:
            rpc_url: Fullnode base URL (falls back to APTOS_RPC_URL / mainnet)
            api_key: Optional bearer token for keyed node providers
            session: Optional aiohttp session (for connection pooling)
            timeout_seconds: Total request timeout
            rate_limit_delay: Minimum spacing between requests in seconds
        """
        self.base_url = (rpc_url or ScoutConfig.get_rpc_url()).rstrip("/")
        self.api_key = api_key if api_key is not None else ScoutConfig.get_api_key()
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else ScoutConfig.get_request_timeout()
        self.rate_limit_delay = rate_limit_delay if rate_limit_delay is not None else ScoutConfig.get_rate_limit_delay()
        self.last_request_time = 0.0
        self._rate_lock: Optional[asyncio.Lock] = None

        self.requests_made = 0

        self._session = session
        self._own_session = False

    async def __aenter__(self) -> "AptosClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._own_session = True
        return self._session

    async def close(self):
        """Close session if we own it."""
        if self._own_session and self._session:
            await self._session.close()
            self._session = None
            self._own_session = False

    async def _rate_limit_async(self):
        """Space requests at least rate_limit_delay apart."""
        if self.rate_limit_delay <= 0:
            return
        if self._rate_lock is None:
            self._rate_lock = asyncio.Lock()
        async with self._rate_lock:
            time_since_last = time.time() - self.last_request_time
            if time_since_last < self.rate_limit_delay:
                await asyncio.sleep(self.rate_limit_delay - time_since_last)
            self.last_request_time = time.time()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def fetch_account_transactions(self, address: str, limit: int = 50) -> List[Dict[str, Any]]:
        """
        Get committed transactions sent by an account, oldest-first.

        Args:
            address: Account address (0x-prefixed hex)
            limit: Maximum number of transactions to return

        Returns:
            List of raw transaction dicts as emitted by the node

        Raises:
            AddressNotFoundError: HTTP 404
            ServerError: HTTP >= 500
            NetworkError: connection failure or timeout
            TransportError: any other failure (other 4xx, malformed body)
        """
        url = f"{self.base_url}/v1/accounts/{address}/transactions"
        params = {"limit": str(int(limit))}

        await self._rate_limit_async()
        session = await self._get_session()
        try:
            async with session.get(
                url,
                params=params,
                headers=self._headers(),
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as response:
                self.requests_made += 1
                status = response.status
                if status == 404:
                    raise AddressNotFoundError(address=address, status=status)
                if status >= 500:
                    raise ServerError(address=address, status=status)
                if status >= 400:
                    raise TransportError(address=address, status=status)
                data = await response.json()
        except TransportError as e:
            logger.warning(f"[Aptos] {address[:8]}... fetch failed ({e.status}): {e}")
            raise
        except (asyncio.TimeoutError, aiohttp.ClientConnectionError) as e:
            logger.warning(f"[Aptos] {address[:8]}... unreachable: {e!r}")
            raise NetworkError(address=address) from e
        except (aiohttp.ClientError, ValueError) as e:
            logger.warning(f"[Aptos] {address[:8]}... bad response: {e!r}")
            raise TransportError(address=address) from e

        if not isinstance(data, list):
            logger.warning(f"[Aptos] {address[:8]}... unexpected body type {type(data).__name__}")
            raise TransportError(address=address, status=status)

        return data
