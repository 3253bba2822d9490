"""
Associated token account derivation, existence and explicit creation.
"""

from __future__ import annotations

import asyncio

import pytest
from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from conftest import SYSTEM_PROGRAM_ID, VALID_WALLET, RecordingSigner, token_account_data
from swell_token.chain.account import TokenAccountResolver, parse_token_account_amount
from swell_token.core.errors import SwellErrorCode, SwellTransferError


@pytest.fixture
def accounts(connection) -> TokenAccountResolver:
    return TokenAccountResolver(connection)


def test_address_is_pure_and_deterministic(accounts, rpc):
    owner = Pubkey.from_string(VALID_WALLET)
    first = accounts.address(owner)
    assert first == accounts.address(owner)
    assert first == get_associated_token_address(owner, accounts.mint)
    rpc.client.get_account_info.assert_not_called()


def test_exists(accounts, rpc):
    funded, empty = Pubkey.new_unique(), Pubkey.new_unique()
    rpc.fund(funded, 0)
    assert asyncio.run(accounts.exists(funded)) is True
    assert asyncio.run(accounts.exists(empty)) is False


def test_read_amount_rejects_foreign_account(accounts, rpc):
    owner = Pubkey.new_unique()
    ata = accounts.address(owner)
    rpc.accounts[ata] = (SYSTEM_PROGRAM_ID, bytes(0))
    with pytest.raises(SwellTransferError) as exc:
        asyncio.run(accounts.read_amount(ata))
    assert exc.value.code == SwellErrorCode.NETWORK_ERROR


def test_parse_token_account_amount_checks_mint(rpc):
    data = token_account_data(rpc.mint, Pubkey.new_unique(), 42)
    assert parse_token_account_amount(data) == 42
    assert parse_token_account_amount(data, rpc.mint) == 42
    assert parse_token_account_amount(data, Pubkey.new_unique()) is None
    assert parse_token_account_amount(b"short") is None


def test_build_create_instruction(accounts):
    payer, owner = Pubkey.new_unique(), Pubkey.new_unique()
    ix = accounts.build_create_instruction(payer, owner)
    keys = [meta.pubkey for meta in ix.accounts]
    assert payer in keys
    assert owner in keys
    assert accounts.address(owner) in keys


def test_create_account_simulation_failure_never_signs(accounts, rpc, sender):
    rpc.client.simulate_transaction.return_value.value.err = "InsufficientFundsForRent"
    with pytest.raises(SwellTransferError) as exc:
        asyncio.run(accounts.create_account(sender, Pubkey.new_unique()))
    assert exc.value.code == SwellErrorCode.SIMULATION_FAILED
    assert sender.signed == []
    rpc.client.send_raw_transaction.assert_not_called()


def test_create_account_user_rejected(accounts, rpc):
    signer = RecordingSigner(error=RuntimeError("User rejected the request"))
    with pytest.raises(SwellTransferError) as exc:
        asyncio.run(accounts.create_account(signer, Pubkey.new_unique()))
    assert exc.value.code == SwellErrorCode.USER_REJECTED
    rpc.client.send_raw_transaction.assert_not_called()


def test_create_account_send_failure(accounts, rpc, sender):
    rpc.client.send_raw_transaction.side_effect = RuntimeError("node is behind")
    with pytest.raises(SwellTransferError) as exc:
        asyncio.run(accounts.create_account(sender, Pubkey.new_unique()))
    assert exc.value.code == SwellErrorCode.ACCOUNT_CREATION_FAILED


def test_create_account_confirms(accounts, rpc, sender):
    owner = Pubkey.new_unique()
    result = asyncio.run(accounts.create_account(sender, owner))
    assert result.address == accounts.address(owner)
    assert result.existed is False
    assert result.create_signature == str(rpc.signature)
    assert len(sender.signed) == 1
    rpc.client.confirm_transaction.assert_awaited_once()


def test_resolve_existing_account_submits_nothing(accounts, rpc, sender):
    owner = Pubkey.new_unique()
    ata = rpc.fund(owner, 5)
    result = asyncio.run(accounts.resolve_or_create(sender, owner, create_missing=True))
    assert result.address == ata
    assert result.existed is True
    assert result.create_signature is None
    rpc.client.send_raw_transaction.assert_not_called()


def test_resolve_missing_without_create(accounts, rpc, sender):
    owner = Pubkey.new_unique()
    result = asyncio.run(accounts.resolve_or_create(sender, owner, create_missing=False))
    assert result.existed is False
    assert result.create_signature is None
    assert sender.signed == []
    rpc.client.send_raw_transaction.assert_not_called()


def test_resolve_missing_with_create(accounts, rpc, sender):
    owner = Pubkey.new_unique()
    result = asyncio.run(accounts.resolve_or_create(sender, owner, create_missing=True))
    assert result.existed is False
    assert result.create_signature == str(rpc.signature)
    rpc.client.send_raw_transaction.assert_awaited_once()
