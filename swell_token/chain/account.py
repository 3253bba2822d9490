"""
SWELL associated token account (ATA) operations.

Derive the deterministic ATA for an owner, check whether it exists, build the
create instruction, and create it explicitly (simulated before it is signed
and sent). Reads and writes are separate calls: nothing named like a read
submits a transaction unless the caller asks for it.
"""

from __future__ import annotations

import asyncio
import struct

from solders.instruction import Instruction
from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import create_associated_token_account, get_associated_token_address

from swell_token.chain import txn
from swell_token.chain.connection import RpcConnectionProvider
from swell_token.core.errors import (
    SwellErrorCode,
    SwellTransferError,
    error_text,
    is_user_rejection,
    read_error,
)
from swell_token.core.types import TokenAccountResult, WalletSigner
from swell_token.swell_logging import get_logger

logger = get_logger(__name__)

# Token account layout: 32 mint + 32 owner + 8 amount + ... (165 bytes total)
TOKEN_ACCOUNT_LEN = 165
TOKEN_ACCOUNT_MINT_OFFSET = 0
TOKEN_ACCOUNT_AMOUNT_OFFSET = 64


def parse_token_account_amount(data: bytes, mint: Pubkey | None = None) -> int | None:
    """
    Return the raw amount from SPL token account data, or None if data is not a
    token account (or belongs to a different mint when mint is given).
    """
    if data is None or len(data) < TOKEN_ACCOUNT_LEN:
        return None
    if mint is not None and bytes(data[TOKEN_ACCOUNT_MINT_OFFSET : TOKEN_ACCOUNT_MINT_OFFSET + 32]) != bytes(mint):
        return None
    (amount,) = struct.unpack_from("<Q", data, TOKEN_ACCOUNT_AMOUNT_OFFSET)
    return amount


class TokenAccountResolver:
    """ATA derivation, existence checks and explicit creation for the SWELL mint."""

    def __init__(self, connection: RpcConnectionProvider, mint: Pubkey | None = None) -> None:
        self._connection = connection
        self._mint = mint or connection.settings.mint

    @property
    def mint(self) -> Pubkey:
        return self._mint

    def address(self, owner: Pubkey) -> Pubkey:
        """Deterministic ATA for owner. Pure: no I/O, same input gives the same address."""
        return get_associated_token_address(owner, self._mint)

    def build_create_instruction(self, payer: Pubkey, owner: Pubkey) -> Instruction:
        """Create-ATA instruction for owner; payer funds the rent. Pure construction."""
        return create_associated_token_account(payer, owner, self._mint)

    async def read_amount(self, token_account: Pubkey) -> int | None:
        """
        Raw SWELL amount held by token_account, or None when the account does not exist.

        Raises NETWORK_ERROR on RPC failure or when the address holds something
        other than a SWELL token account.
        """
        try:
            resp = await self._connection.get().get_account_info(token_account, self._connection.commitment)
        except Exception as e:
            raise read_error(e, context="Failed to fetch token account") from e
        account = resp.value
        if account is None:
            return None
        amount = parse_token_account_amount(bytes(account.data), self._mint)
        if account.owner != TOKEN_PROGRAM_ID or amount is None:
            raise SwellTransferError(
                f"{token_account} is not a SWELL token account", SwellErrorCode.NETWORK_ERROR
            )
        return amount

    async def exists(self, owner: Pubkey) -> bool:
        """True if owner's SWELL account exists on-chain; absence is False, not an error."""
        return await self.read_amount(self.address(owner)) is not None

    async def create_account(self, signer: WalletSigner, owner: Pubkey) -> TokenAccountResult:
        """
        Create owner's SWELL account, paid by signer.

        Simulates first and only signs and submits if the simulation reports no
        error; waits for confirmation before returning. Raises SIMULATION_FAILED,
        USER_REJECTED, or ACCOUNT_CREATION_FAILED.
        """
        ata = self.address(owner)
        payer = signer.public_key
        settings = self._connection.settings
        try:
            blockhash = await self._connection.latest_blockhash()
            transaction = txn.build_transaction([self.build_create_instruction(payer, owner)], payer, blockhash)

            sim_err, sim_logs = await txn.simulate_transaction(self._connection, transaction)
            if sim_err is not None:
                logger.warning(
                    "swell_account_simulation_failed",
                    owner=str(owner),
                    err=txn.describe_error(sim_err),
                    logs=sim_logs[-5:],
                )
                raise SwellTransferError(
                    f"ATA creation simulation failed: {txn.describe_error(sim_err)}",
                    SwellErrorCode.SIMULATION_FAILED,
                )

            try:
                signed = await txn.sign_with(signer, transaction)
            except Exception as e:
                if is_user_rejection(e):
                    raise SwellTransferError("User rejected the transaction", SwellErrorCode.USER_REJECTED, e) from e
                raise

            confirmation = await txn.send_and_confirm(
                self._connection, signed, blockhash, settings.confirm_timeout_sec
            )
            if confirmation.err is not None:
                raise SwellTransferError(
                    f"Token account creation failed on-chain: {txn.describe_error(confirmation.err)}",
                    SwellErrorCode.ACCOUNT_CREATION_FAILED,
                )
        except SwellTransferError:
            raise
        except asyncio.TimeoutError as e:
            raise SwellTransferError(
                f"Token account creation not confirmed within {settings.confirm_timeout_ms} ms",
                SwellErrorCode.ACCOUNT_CREATION_FAILED,
                e,
            ) from e
        except Exception as e:
            logger.warning("swell_account_creation_failed", owner=str(owner), error=str(e))
            raise SwellTransferError(
                f"Failed to create token account: {error_text(e)}",
                SwellErrorCode.ACCOUNT_CREATION_FAILED,
                e,
            ) from e

        logger.info(
            "swell_account_created",
            owner=str(owner),
            token_account=str(ata),
            signature=confirmation.signature,
        )
        return TokenAccountResult(address=ata, existed=False, create_signature=confirmation.signature)

    async def resolve_or_create(
        self,
        signer: WalletSigner,
        owner: Pubkey,
        *,
        create_missing: bool,
    ) -> TokenAccountResult:
        """
        Resolve owner's SWELL account; create it only when create_missing is True.

        With create_missing=False a missing account is reported as existed=False
        and nothing is submitted.
        """
        ata = self.address(owner)
        if await self.exists(owner):
            return TokenAccountResult(address=ata, existed=True, create_signature=None)
        if not create_missing:
            return TokenAccountResult(address=ata, existed=False, create_signature=None)
        return await self.create_account(signer, owner)
