"""
SwellTokenClient: single entry point composing every SWELL component.

    async with SwellTokenClient() as swell:
        balance = await swell.get_balance(owner)
        result = await swell.transfer(TransferParams(sender=wallet, recipient=to, amount="10"))

All components share one RpcConnectionProvider and one MintMetadataCache, so
decimals are fetched once per client. Build a new client for a fresh cache.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Union

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from swell_token.chain import amounts
from swell_token.chain.account import TokenAccountResolver
from swell_token.chain.balance import BalanceReader
from swell_token.chain.connection import RpcConnectionProvider
from swell_token.chain.mint import MintMetadataCache
from swell_token.chain.transfer import TransferOrchestrator, parse_recipient
from swell_token.config.settings import SwellSettings, get_settings
from swell_token.core.types import (
    TokenAccountResult,
    TokenBalance,
    TransferParams,
    TransferResult,
    WalletSigner,
)

AddressLike = Union[Pubkey, str]


def _pubkey(address: AddressLike) -> Pubkey:
    return address if isinstance(address, Pubkey) else parse_recipient(address)


class SwellTokenClient:
    def __init__(
        self,
        settings: SwellSettings | None = None,
        *,
        connection: RpcConnectionProvider | None = None,
    ) -> None:
        self.settings = settings or (connection.settings if connection else get_settings())
        self.connection = connection or RpcConnectionProvider(self.settings)
        self.mint = MintMetadataCache(self.connection)
        self.accounts = TokenAccountResolver(self.connection)
        self.balances = BalanceReader(self.accounts, self.mint)
        self.transfers = TransferOrchestrator(self.connection, self.accounts, self.balances, self.mint)

    async def __aenter__(self) -> "SwellTokenClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.connection.close()

    async def is_healthy(self) -> bool:
        return await self.connection.health_check()

    async def get_decimals(self) -> int:
        return await self.mint.decimals()

    def get_token_account_address(self, owner: AddressLike) -> Pubkey:
        return self.accounts.address(_pubkey(owner))

    async def does_account_exist(self, owner: AddressLike) -> bool:
        return await self.accounts.exists(_pubkey(owner))

    def create_account_instruction(self, payer: AddressLike, owner: AddressLike) -> Instruction:
        return self.accounts.build_create_instruction(_pubkey(payer), _pubkey(owner))

    async def create_account(self, signer: WalletSigner, owner: AddressLike) -> TokenAccountResult:
        return await self.accounts.create_account(signer, _pubkey(owner))

    async def resolve_or_create_account(
        self, signer: WalletSigner, owner: AddressLike, *, create_missing: bool
    ) -> TokenAccountResult:
        return await self.accounts.resolve_or_create(signer, _pubkey(owner), create_missing=create_missing)

    async def get_balance(self, owner: AddressLike) -> TokenBalance:
        return await self.balances.balance(_pubkey(owner))

    async def transfer(self, params: TransferParams) -> TransferResult:
        return await self.transfers.transfer(params)

    # Amount helpers bound to the cached mint decimals

    async def to_raw_amount(self, amount: amounts.AmountLike) -> int:
        return amounts.to_raw_amount(amount, await self.mint.decimals())

    async def from_raw_amount(self, raw_amount: int) -> Decimal:
        return amounts.from_raw_amount(raw_amount, await self.mint.decimals())

    async def format_amount(self, raw_amount: int, display_decimals: int = 2) -> str:
        return amounts.format_amount(raw_amount, await self.mint.decimals(), display_decimals)

    async def is_valid_transfer_amount(self, amount: amounts.AmountLike) -> bool:
        return amounts.is_valid_transfer_amount(amount, await self.mint.decimals())
