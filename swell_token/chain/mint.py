"""
SWELL mint metadata: decimals fetched from chain once and cached.

No hardcoded decimals anywhere; balance and transfer math always ask this cache.
"""

from __future__ import annotations

from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_PROGRAM_ID

from swell_token.chain.connection import RpcConnectionProvider
from swell_token.core.errors import SwellErrorCode, SwellTransferError, error_text
from swell_token.swell_logging import get_logger

logger = get_logger(__name__)

# Mint layout: 4 authority option + 32 authority + 8 supply + 1 decimals + 1 is_initialized + 4 + 32
MINT_ACCOUNT_LEN = 82
MINT_DECIMALS_OFFSET = 44
MINT_INITIALIZED_OFFSET = 45


def parse_mint_decimals(data: bytes) -> int | None:
    """Return decimals from raw SPL mint account data, or None if it is not an initialized mint."""
    if data is None or len(data) < MINT_ACCOUNT_LEN:
        return None
    if data[MINT_INITIALIZED_OFFSET] != 1:
        return None
    return data[MINT_DECIMALS_OFFSET]


class MintMetadataCache:
    """
    Decimals of the configured mint, fetched at most once per instance.

    Concurrent first calls may both hit the network; the result is identical,
    so the race costs one redundant read and nothing else. A failed fetch
    leaves the cache empty so a later call retries.
    """

    def __init__(self, connection: RpcConnectionProvider, mint: Pubkey | None = None) -> None:
        self._connection = connection
        self._mint = mint or connection.settings.mint
        self._decimals: int | None = None

    @property
    def mint(self) -> Pubkey:
        return self._mint

    @property
    def cached_decimals(self) -> int | None:
        return self._decimals

    async def decimals(self) -> int:
        """Decimal places of the mint; network on first call only."""
        if self._decimals is not None:
            return self._decimals
        decimals = await self._fetch_decimals()
        self._decimals = decimals
        logger.info("swell_mint_decimals_cached", mint=str(self._mint), decimals=decimals)
        return decimals

    def invalidate(self) -> None:
        """Clear the cache; the next decimals() call fetches from chain again."""
        self._decimals = None

    async def _fetch_decimals(self) -> int:
        try:
            resp = await self._connection.get().get_account_info(self._mint, self._connection.commitment)
        except Exception as e:
            logger.warning("swell_mint_fetch_failed", mint=str(self._mint), error=str(e))
            raise SwellTransferError(
                f"Failed to fetch SWELL mint info: {error_text(e)}",
                SwellErrorCode.MINT_FETCH_FAILED,
                e,
            ) from e

        account = resp.value
        if account is None:
            raise SwellTransferError(
                f"SWELL mint account not found: {self._mint}", SwellErrorCode.MINT_FETCH_FAILED
            )
        if account.owner != TOKEN_PROGRAM_ID:
            raise SwellTransferError(
                f"SWELL mint {self._mint} is not owned by the SPL token program",
                SwellErrorCode.MINT_FETCH_FAILED,
            )
        decimals = parse_mint_decimals(bytes(account.data))
        if decimals is None:
            raise SwellTransferError(
                f"SWELL mint {self._mint} is not an initialized mint", SwellErrorCode.MINT_FETCH_FAILED
            )
        return decimals
