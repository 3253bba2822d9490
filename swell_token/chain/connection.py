"""
Solana RPC connection provider.

Holds one AsyncClient per provider instance, created lazily on first use and
reused by every component that shares the provider. No retries: each read is
a single RPC call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.hash import Hash

from swell_token.config.env import mask_rpc_url
from swell_token.config.settings import SwellSettings, get_settings
from swell_token.core.errors import read_error
from swell_token.swell_logging import get_logger

logger = get_logger(__name__)

DEFAULT_RPC_TIMEOUT_SEC = 30.0


@dataclass(frozen=True)
class BlockhashInfo:
    """Recent blockhash plus the last block height at which it is still valid."""

    blockhash: Hash
    last_valid_block_height: int


class RpcConnectionProvider:
    """
    Lazily created AsyncClient configured from SwellSettings.

    Share one provider between components to share the client. reset() drops
    the client so the next get() builds a fresh one; close() also releases its
    HTTP session. Usable as an async context manager.
    """

    def __init__(
        self,
        settings: SwellSettings | None = None,
        *,
        client: AsyncClient | None = None,
        timeout_sec: float = DEFAULT_RPC_TIMEOUT_SEC,
    ) -> None:
        self._settings = settings or get_settings()
        self._client: AsyncClient | None = client
        self._timeout_sec = timeout_sec

    @property
    def settings(self) -> SwellSettings:
        return self._settings

    @property
    def commitment(self) -> Commitment:
        return Commitment(self._settings.commitment)

    def get(self) -> AsyncClient:
        """Return the shared client, creating it on first call."""
        if self._client is None:
            self._client = self.create()
            logger.debug(
                "swell_connection_created",
                rpc_url=mask_rpc_url(self._settings.rpc_url),
                commitment=self._settings.commitment,
            )
        return self._client

    def create(
        self,
        endpoint: str | None = None,
        commitment: str | None = None,
        timeout_sec: float | None = None,
    ) -> AsyncClient:
        """Build a new, unshared client (custom endpoint or commitment, tests)."""
        return AsyncClient(
            endpoint or self._settings.rpc_url,
            commitment=Commitment(commitment or self._settings.commitment),
            timeout=timeout_sec if timeout_sec is not None else self._timeout_sec,
        )

    def reset(self) -> None:
        """Drop the shared client; the next get() creates a new one."""
        self._client = None

    async def close(self) -> None:
        """Close the shared client's HTTP session and drop it."""
        client, self._client = self._client, None
        if client is not None:
            await client.close()

    async def __aenter__(self) -> "RpcConnectionProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def health_check(self) -> bool:
        """One lightweight read (getSlot). Returns False instead of raising."""
        try:
            await self.get().get_slot(self.commitment)
            return True
        except Exception as e:
            logger.warning(
                "swell_connection_unhealthy",
                rpc_url=mask_rpc_url(self._settings.rpc_url),
                error=str(e),
            )
            return False

    async def current_slot(self) -> int:
        try:
            resp = await self.get().get_slot(self.commitment)
        except Exception as e:
            raise read_error(e, context="Failed to fetch current slot") from e
        return int(resp.value)

    async def latest_blockhash(self) -> BlockhashInfo:
        """Fetch a fresh blockhash at the configured commitment."""
        try:
            resp = await self.get().get_latest_blockhash(self.commitment)
        except Exception as e:
            raise read_error(e, context="Failed to fetch latest blockhash") from e
        value = resp.value
        return BlockhashInfo(
            blockhash=value.blockhash,
            last_valid_block_height=int(value.last_valid_block_height),
        )
