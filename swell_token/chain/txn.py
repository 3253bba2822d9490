"""
Transaction plumbing shared by account creation and transfers.

build -> simulate -> sign -> send -> confirm, each step a single call. Callers
own error classification; these helpers raise whatever the RPC layer raises,
except simulate_transaction which reports the simulation error as a value.
"""

from __future__ import annotations

import asyncio
import inspect
import json
from dataclasses import dataclass
from typing import Any, Sequence

from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from swell_token.chain.connection import BlockhashInfo, RpcConnectionProvider
from swell_token.core.types import WalletSigner
from swell_token.swell_logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Confirmation:
    """Outcome of waiting on a submitted transaction."""

    signature: str
    slot: int
    err: Any  # None when the transaction executed successfully


def build_transaction(instructions: Sequence[Instruction], fee_payer: Pubkey, blockhash: BlockhashInfo) -> Transaction:
    """Unsigned legacy transaction with fee payer and recent blockhash set."""
    message = Message.new_with_blockhash(list(instructions), fee_payer, blockhash.blockhash)
    return Transaction.new_unsigned(message)


def describe_error(err: Any) -> str:
    """Render an RPC transaction error (solders object, dict or str) for messages."""
    if isinstance(err, (dict, list)):
        return json.dumps(err, default=str)
    return str(err)


async def simulate_transaction(connection: RpcConnectionProvider, transaction: Transaction) -> tuple[Any, list[str]]:
    """Dry-run without signatures. Returns (err, logs); err is None on success."""
    resp = await connection.get().simulate_transaction(
        transaction, sig_verify=False, commitment=connection.commitment
    )
    value = resp.value
    logs = list(getattr(value, "logs", None) or [])
    return value.err, logs


async def sign_with(signer: WalletSigner, transaction: Transaction) -> Transaction:
    """Delegate to the caller's signer; sync and async sign functions are both accepted."""
    signed = signer.sign_transaction(transaction)
    if inspect.isawaitable(signed):
        signed = await signed
    return signed


async def send_and_confirm(
    connection: RpcConnectionProvider,
    signed: Transaction,
    blockhash: BlockhashInfo,
    timeout_sec: float,
) -> Confirmation:
    """
    Broadcast a signed transaction and wait for the configured commitment.

    Confirmation is bounded both by the blockhash's last valid block height and
    by timeout_sec; exceeding the latter raises asyncio.TimeoutError.
    """
    client = connection.get()
    opts = TxOpts(skip_preflight=False, preflight_commitment=connection.commitment)
    sent = await client.send_raw_transaction(bytes(signed), opts=opts)
    signature: Signature = sent.value
    logger.info("swell_tx_sent", signature=str(signature))

    resp = await asyncio.wait_for(
        client.confirm_transaction(
            signature,
            connection.commitment,
            last_valid_block_height=blockhash.last_valid_block_height,
        ),
        timeout=timeout_sec,
    )
    statuses = resp.value or []
    status = statuses[0] if statuses else None
    slot = int(status.slot) if status is not None and status.slot else int(resp.context.slot)
    err = status.err if status is not None else None
    return Confirmation(signature=str(signature), slot=slot, err=err)
