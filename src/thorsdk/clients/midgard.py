"""Midgard and THORNode API clients.

Midgard serves aggregated market data (pools, depths, prices); THORNode
serves the live vault state needed to send a swap.
API docs: https://dev.thorchain.org/
"""

import logging
from typing import Optional

import httpx

from thorsdk.clients.base import InboundAddress

logger = logging.getLogger(__name__)


class MidgardClient:
    """Read-only client for the Midgard v2 API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Midgard client.

        Args:
            base_url: Midgard base URL including the /v2 prefix
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def get_pools(self, status: Optional[str] = None) -> list[dict]:
        """Get all pools.

        Args:
            status: Optional pool status filter (available, staged, suspended)

        Raises:
            httpx.HTTPError: On network failure or non-2xx response
            ValueError: If the payload is not a list of pools
        """
        params = {"status": status} if status else None

        async with self._client() as client:
            response = await client.get(f"{self.base_url}/pools", params=params)
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, list):
            raise ValueError(f"Unexpected Midgard /pools payload: {type(data).__name__}")

        logger.debug(f"Fetched {len(data)} pools from Midgard")
        return data


class ThornodeClient:
    """Client for THORNode vault endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def get_inbound_addresses(self) -> dict[str, InboundAddress]:
        """Get current inbound vault addresses keyed by chain.

        Raises:
            httpx.HTTPError: On network failure or non-2xx response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(f"{self.base_url}/thorchain/inbound_addresses")
            response.raise_for_status()
            data = response.json()

        result = {}
        for item in data:
            chain = str(item.get("chain", "")).upper()
            if not chain:
                continue
            result[chain] = InboundAddress(
                chain=chain,
                address=item.get("address", ""),
                router=item.get("router") or None,
                halted=bool(item.get("halted", False)),
                gas_rate=item.get("gas_rate"),
            )

        return result
