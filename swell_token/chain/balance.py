"""
SWELL balance reads.

Uses chain-derived decimals from the mint cache. A wallet that never held
SWELL has no token account: that is a zero balance, not an error.
"""

from __future__ import annotations

from decimal import Decimal

from solders.pubkey import Pubkey

from swell_token.chain.account import TokenAccountResolver
from swell_token.chain.amounts import from_raw_amount
from swell_token.chain.mint import MintMetadataCache
from swell_token.core.types import TokenBalance
from swell_token.swell_logging import get_logger

logger = get_logger(__name__)


class BalanceReader:
    def __init__(self, accounts: TokenAccountResolver, mint: MintMetadataCache) -> None:
        self._accounts = accounts
        self._mint = mint

    async def balance(self, owner: Pubkey) -> TokenBalance:
        """
        SWELL balance for owner.

        Missing account -> amount 0, account_exists False. RPC failures raise
        NETWORK_ERROR; decimals failures raise MINT_FETCH_FAILED.
        """
        token_account = self._accounts.address(owner)
        decimals = await self._mint.decimals()
        raw_amount = await self._accounts.read_amount(token_account)

        if raw_amount is None:
            logger.debug("swell_balance_no_account", owner=str(owner), token_account=str(token_account))
            return TokenBalance(
                amount=Decimal(0),
                raw_amount=0,
                token_account=token_account,
                account_exists=False,
                decimals=decimals,
            )

        logger.debug("swell_balance_read", owner=str(owner), raw_amount=raw_amount)
        return TokenBalance(
            amount=from_raw_amount(raw_amount, decimals),
            raw_amount=raw_amount,
            token_account=token_account,
            account_exists=True,
            decimals=decimals,
        )
