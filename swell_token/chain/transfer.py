"""
SWELL transfers: validate -> check balance -> build -> simulate -> sign -> send -> confirm.

Strictly sequential, single attempt. Nothing is signed unless the simulation
is clean, and nothing is submitted unless the signer returns a transaction.
A retry by the caller is a brand-new transaction with a fresh blockhash.
"""

from __future__ import annotations

import asyncio
from typing import Union

from solders.compute_budget import set_compute_unit_limit, set_compute_unit_price
from solders.instruction import Instruction
from solders.pubkey import Pubkey
from solders.signature import Signature
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import TransferParams as SplTransferParams
from spl.token.instructions import transfer as spl_transfer

from swell_token.chain import txn
from swell_token.chain.account import TokenAccountResolver
from swell_token.chain.amounts import parse_amount, to_raw_amount
from swell_token.chain.balance import BalanceReader
from swell_token.chain.connection import RpcConnectionProvider
from swell_token.chain.mint import MintMetadataCache
from swell_token.config.settings import explorer_tx_url
from swell_token.core.errors import (
    SwellErrorCode,
    SwellTransferError,
    classify_error,
    error_text,
    is_user_rejection,
)
from swell_token.core.types import TransferParams, TransferResult
from swell_token.swell_logging import bind_transfer, get_logger

logger = get_logger(__name__)


def parse_recipient(recipient: Union[Pubkey, str]) -> Pubkey:
    """Return recipient as a Pubkey; raise INVALID_RECIPIENT if it is not a valid address."""
    if isinstance(recipient, Pubkey):
        return recipient
    try:
        return Pubkey.from_string(str(recipient).strip())
    except Exception as e:
        raise SwellTransferError(
            "Invalid recipient address", SwellErrorCode.INVALID_RECIPIENT, e
        ) from e


def build_transfer_instructions(
    *,
    sender: Pubkey,
    sender_token_account: Pubkey,
    recipient_token_account: Pubkey,
    raw_amount: int,
    priority_fee: int,
    compute_units: int,
    create_recipient_account: Instruction | None = None,
) -> list[Instruction]:
    """
    Instructions in wire order: [CU limit, CU price] if priority_fee > 0,
    then the recipient's create-ATA if given, then the SPL transfer.
    """
    instructions: list[Instruction] = []
    if priority_fee > 0:
        instructions.append(set_compute_unit_limit(compute_units))
        instructions.append(set_compute_unit_price(priority_fee))
    if create_recipient_account is not None:
        instructions.append(create_recipient_account)
    instructions.append(
        spl_transfer(
            SplTransferParams(
                program_id=TOKEN_PROGRAM_ID,
                source=sender_token_account,
                dest=recipient_token_account,
                owner=sender,
                amount=raw_amount,
                signers=[],
            )
        )
    )
    return instructions


class TransferOrchestrator:
    """Runs one SWELL transfer end to end and returns a confirmed TransferResult."""

    def __init__(
        self,
        connection: RpcConnectionProvider,
        accounts: TokenAccountResolver,
        balances: BalanceReader,
        mint: MintMetadataCache,
    ) -> None:
        self._connection = connection
        self._accounts = accounts
        self._balances = balances
        self._mint = mint

    async def transfer(self, params: TransferParams) -> TransferResult:
        """
        Transfer SWELL from params.sender to params.recipient.

        Raises SwellTransferError with INVALID_AMOUNT / INVALID_RECIPIENT (before
        any account I/O), INSUFFICIENT_BALANCE, SIMULATION_FAILED, USER_REJECTED,
        INSUFFICIENT_SOL, CONFIRMATION_FAILED, NETWORK_ERROR, MINT_FETCH_FAILED or UNKNOWN.
        """
        settings = self._connection.settings
        sender = params.sender.public_key
        recipient = parse_recipient(params.recipient)
        log = bind_transfer(sender, recipient)

        # Step 1: validate inputs
        amount = parse_amount(params.amount)
        if sender == recipient:
            raise SwellTransferError("Cannot transfer to yourself", SwellErrorCode.INVALID_RECIPIENT)
        priority_fee = settings.default_priority_fee if params.priority_fee is None else params.priority_fee
        if isinstance(priority_fee, bool) or not isinstance(priority_fee, int) or priority_fee < 0:
            raise SwellTransferError(
                f"Priority fee must be a non-negative integer, got {priority_fee!r}",
                SwellErrorCode.INVALID_AMOUNT,
            )

        # Decimals first: with a warm cache this is free, and an over-precise
        # amount is rejected before any account is read.
        decimals = await self._mint.decimals()
        raw_amount = to_raw_amount(amount, decimals)
        log.info("swell_transfer_started", amount=str(amount), raw_amount=raw_amount, priority_fee=priority_fee)

        # Steps 2-3: sender balance and recipient account, concurrently
        sender_balance, recipient_exists = await asyncio.gather(
            self._balances.balance(sender),
            self._accounts.exists(recipient),
        )
        if not sender_balance.account_exists:
            log.warning("swell_transfer_rejected", code=SwellErrorCode.INSUFFICIENT_BALANCE.value, reason="no_account")
            raise SwellTransferError(
                "Sender does not have a SWELL token account", SwellErrorCode.INSUFFICIENT_BALANCE
            )
        if sender_balance.raw_amount < raw_amount:
            log.warning(
                "swell_transfer_rejected",
                code=SwellErrorCode.INSUFFICIENT_BALANCE.value,
                have_raw=sender_balance.raw_amount,
                need_raw=raw_amount,
            )
            raise SwellTransferError(
                f"Insufficient SWELL balance. Have: {sender_balance.amount}, Need: {amount}",
                SwellErrorCode.INSUFFICIENT_BALANCE,
            )

        sender_ata = sender_balance.token_account
        recipient_ata = self._accounts.address(recipient)

        # Step 4: build
        blockhash = await self._connection.latest_blockhash()
        instructions = build_transfer_instructions(
            sender=sender,
            sender_token_account=sender_ata,
            recipient_token_account=recipient_ata,
            raw_amount=raw_amount,
            priority_fee=priority_fee,
            compute_units=settings.default_compute_units,
            create_recipient_account=(
                None if recipient_exists else self._accounts.build_create_instruction(sender, recipient)
            ),
        )
        transaction = txn.build_transaction(instructions, sender, blockhash)

        # Step 5: simulate
        try:
            sim_err, sim_logs = await txn.simulate_transaction(self._connection, transaction)
        except Exception as e:
            raise classify_error(e, context="Transaction simulation request failed") from e
        if sim_err is not None:
            log.warning("swell_transfer_simulation_failed", err=txn.describe_error(sim_err), logs=sim_logs[-5:])
            raise SwellTransferError(
                f"Transaction simulation failed: {txn.describe_error(sim_err)}",
                SwellErrorCode.SIMULATION_FAILED,
            )
        log.debug(
            "swell_transfer_simulated",
            instruction_count=len(instructions),
            creates_recipient_account=not recipient_exists,
        )

        # Step 6: sign
        try:
            signed = await txn.sign_with(params.sender, transaction)
        except Exception as e:
            if is_user_rejection(e):
                log.info("swell_transfer_user_rejected")
                raise SwellTransferError("User rejected the transaction", SwellErrorCode.USER_REJECTED, e) from e
            raise SwellTransferError(
                f"Failed to sign transaction: {error_text(e)}", SwellErrorCode.UNKNOWN, e
            ) from e

        # Step 7: send and confirm
        try:
            confirmation = await txn.send_and_confirm(
                self._connection, signed, blockhash, settings.confirm_timeout_sec
            )
        except asyncio.TimeoutError as e:
            raise SwellTransferError(
                f"Transaction not confirmed within {settings.confirm_timeout_ms} ms",
                SwellErrorCode.CONFIRMATION_FAILED,
                e,
            ) from e
        except Exception as e:
            typed = classify_error(e)
            log.warning("swell_transfer_failed", code=typed.code.value, error=str(e))
            raise typed from e
        if confirmation.err is not None:
            log.warning("swell_transfer_failed_onchain", signature=confirmation.signature, err=str(confirmation.err))
            raise SwellTransferError(
                f"Transaction failed: {txn.describe_error(confirmation.err)}",
                SwellErrorCode.CONFIRMATION_FAILED,
            )

        # Step 8: block time for the result
        block_time = await self._fetch_block_time(confirmation.signature)
        log.info(
            "swell_transfer_confirmed",
            signature=confirmation.signature,
            slot=confirmation.slot,
            raw_amount=raw_amount,
        )
        return TransferResult(
            signature=confirmation.signature,
            slot=confirmation.slot,
            block_time=block_time,
            explorer_url=explorer_tx_url(confirmation.signature, settings),
        )

    async def _fetch_block_time(self, signature: str) -> int | None:
        """Block time of a confirmed transaction; None if the node cannot say (the transfer already landed)."""
        try:
            resp = await self._connection.get().get_transaction(
                Signature.from_string(signature),
                commitment=self._connection.commitment,
                max_supported_transaction_version=0,
            )
        except Exception as e:
            logger.warning("swell_transfer_block_time_unavailable", signature=signature, error=str(e))
            return None
        value = resp.value
        if value is None or value.block_time is None:
            return None
        return int(value.block_time)
