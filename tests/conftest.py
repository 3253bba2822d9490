"""
Pytest fixtures for SWELL tests. RPC is a MagicMock with AsyncMock methods, so no network is used.
"""

from __future__ import annotations

import struct
from unittest.mock import AsyncMock, MagicMock

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import get_associated_token_address

from swell_token.chain.connection import RpcConnectionProvider
from swell_token.client import SwellTokenClient
from swell_token.config.settings import SwellSettings

SWELL_MINT = "3L3dY6ZQnZ68MKhFCYVZYhimAdWbuAREdsY5fhebcDao"
VALID_WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
SYSTEM_PROGRAM_ID = Pubkey.from_string("11111111111111111111111111111111")


def mint_data(decimals: int) -> bytes:
    """82-byte initialized SPL mint with the given decimals."""
    data = bytearray(82)
    data[44] = decimals
    data[45] = 1
    return bytes(data)


def token_account_data(mint: Pubkey, owner: Pubkey, amount: int) -> bytes:
    """165-byte SPL token account holding amount raw units."""
    data = bytes(mint) + bytes(owner) + struct.pack("<Q", amount)
    return data + bytes(165 - len(data))


class FakeRpc:
    """
    In-memory chain state behind a mocked AsyncClient.

    accounts maps address -> (owner program, data). Every RPC method is an
    AsyncMock so tests can assert on call counts and arguments.
    """

    def __init__(self, mint: Pubkey, decimals: int = 9) -> None:
        self.mint = mint
        self.accounts: dict[Pubkey, tuple[Pubkey, bytes]] = {mint: (TOKEN_PROGRAM_ID, mint_data(decimals))}
        self.signature = Signature.new_unique()
        self.client = MagicMock()
        self.client.get_account_info = AsyncMock(side_effect=self._get_account_info)
        self.client.get_slot = AsyncMock(return_value=MagicMock(value=321))
        self.client.get_latest_blockhash = AsyncMock(
            return_value=MagicMock(value=MagicMock(blockhash=Hash.new_unique(), last_valid_block_height=1_000))
        )
        self.client.simulate_transaction = AsyncMock(return_value=MagicMock(value=MagicMock(err=None, logs=[])))
        self.client.send_raw_transaction = AsyncMock(return_value=MagicMock(value=self.signature))
        self.client.confirm_transaction = AsyncMock(
            return_value=MagicMock(value=[MagicMock(err=None, slot=4_242)], context=MagicMock(slot=4_243))
        )
        self.client.get_transaction = AsyncMock(return_value=MagicMock(value=MagicMock(block_time=1_700_000_000)))
        self.client.close = AsyncMock()

    def _get_account_info(self, pubkey, *args, **kwargs):
        entry = self.accounts.get(pubkey)
        if entry is None:
            return MagicMock(value=None)
        owner, data = entry
        return MagicMock(value=MagicMock(owner=owner, data=data))

    def fund(self, owner: Pubkey, raw_amount: int) -> Pubkey:
        """Create owner's ATA holding raw_amount; return the ATA."""
        ata = get_associated_token_address(owner, self.mint)
        self.accounts[ata] = (TOKEN_PROGRAM_ID, token_account_data(self.mint, owner, raw_amount))
        return ata

    def account_reads(self, address: Pubkey) -> int:
        return sum(1 for c in self.client.get_account_info.call_args_list if c.args and c.args[0] == address)


class RecordingSigner:
    """Signs with a local keypair and records every transaction it was asked to sign."""

    def __init__(self, keypair: Keypair | None = None, error: Exception | None = None) -> None:
        self.keypair = keypair or Keypair()
        self.error = error
        self.signed: list = []

    @property
    def public_key(self) -> Pubkey:
        return self.keypair.pubkey()

    async def sign_transaction(self, transaction):
        self.signed.append(transaction)
        if self.error is not None:
            raise self.error
        transaction.sign([self.keypair], transaction.message.recent_blockhash)
        return transaction


@pytest.fixture
def settings() -> SwellSettings:
    return SwellSettings(
        cluster="mainnet-beta",
        rpc_url="http://127.0.0.1:8899",
        commitment="confirmed",
        mint_address=SWELL_MINT,
        default_priority_fee=1_000,
        default_compute_units=100_000,
        confirm_timeout_ms=5_000,
        explorer_url="https://explorer.solana.com",
    )


@pytest.fixture
def rpc(settings) -> FakeRpc:
    return FakeRpc(settings.mint, decimals=9)


@pytest.fixture
def connection(settings, rpc) -> RpcConnectionProvider:
    return RpcConnectionProvider(settings, client=rpc.client)


@pytest.fixture
def swell(settings, connection) -> SwellTokenClient:
    return SwellTokenClient(settings, connection=connection)


@pytest.fixture
def sender() -> RecordingSigner:
    return RecordingSigner()
