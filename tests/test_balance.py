"""
SWELL balance reads.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal

import httpx
import pytest
from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_PROGRAM_ID

from conftest import mint_data
from swell_token.client import SwellTokenClient
from swell_token.core.errors import SwellErrorCode, SwellTransferError


def test_missing_account_is_zero_balance(swell, rpc):
    owner = Pubkey.new_unique()
    bal = asyncio.run(swell.get_balance(owner))
    assert bal.amount == Decimal(0)
    assert bal.raw_amount == 0
    assert bal.account_exists is False
    assert bal.decimals == 9
    assert bal.token_account == swell.get_token_account_address(owner)


def test_balance_uses_chain_decimals(swell, rpc):
    owner = Pubkey.new_unique()
    rpc.fund(owner, 50_000_000_000)
    bal = asyncio.run(swell.get_balance(str(owner)))
    assert bal.amount == Decimal(50)
    assert bal.raw_amount == 50_000_000_000
    assert bal.account_exists is True
    assert asyncio.run(swell.format_amount(bal.raw_amount)) == "50.00"


def test_balance_with_six_decimal_mint(settings, connection, rpc):
    rpc.accounts[settings.mint] = (TOKEN_PROGRAM_ID, mint_data(6))
    swell = SwellTokenClient(settings, connection=connection)
    owner = Pubkey.new_unique()
    rpc.fund(owner, 1_500_000)
    assert asyncio.run(swell.get_balance(owner)).amount == Decimal("1.5")


def test_rpc_failure_is_network_error(swell, rpc):
    asyncio.run(swell.get_decimals())
    rpc.client.get_account_info.side_effect = httpx.ConnectError("refused")
    with pytest.raises(SwellTransferError) as exc:
        asyncio.run(swell.get_balance(Pubkey.new_unique()))
    assert exc.value.code == SwellErrorCode.NETWORK_ERROR


def test_invalid_owner_address(swell):
    with pytest.raises(SwellTransferError) as exc:
        asyncio.run(swell.get_balance("not-a-wallet"))
    assert exc.value.code == SwellErrorCode.INVALID_RECIPIENT


@pytest.mark.parametrize(
    "error",
    [
        OSError("[SSL: CERTIFICATE_VERIFY_FAILED] certificate has expired"),
        RuntimeError("upstream: insufficient funds on relay account"),
    ],
)
def test_read_failure_wording_does_not_change_code(swell, rpc, error):
    asyncio.run(swell.get_decimals())
    rpc.client.get_account_info.side_effect = error
    with pytest.raises(SwellTransferError) as exc:
        asyncio.run(swell.get_balance(Pubkey.new_unique()))
    assert exc.value.code == SwellErrorCode.NETWORK_ERROR
    assert exc.value.cause is error


def test_foreign_account_at_token_address_is_network_error(swell, rpc):
    owner = Pubkey.new_unique()
    rpc.accounts[swell.get_token_account_address(owner)] = (Pubkey.new_unique(), bytes(165))
    with pytest.raises(SwellTransferError) as exc:
        asyncio.run(swell.get_balance(owner))
    assert exc.value.code == SwellErrorCode.NETWORK_ERROR
