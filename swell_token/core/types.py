"""
Wallet-agnostic value objects for SWELL operations.

Any wallet that exposes a public key and a sign function can drive a transfer:
wallet adapters, mobile wallets, or a local keypair (see swell_token.tools.signers).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Awaitable, Protocol, Union, runtime_checkable

from solders.pubkey import Pubkey
from solders.transaction import Transaction


@runtime_checkable
class WalletSigner(Protocol):
    """Minimal signing capability: public key plus a transaction-signing function."""

    @property
    def public_key(self) -> Pubkey: ...

    def sign_transaction(self, transaction: Transaction) -> Union[Transaction, Awaitable[Transaction]]:
        """Sign and return the transaction. May be sync or async; raise to decline."""
        ...


@dataclass(frozen=True)
class TransferParams:
    """
    Parameters for a SWELL transfer.

    amount is in token units (e.g. Decimal("10.5") means 10.5 SWELL). str and
    int are accepted; floats are converted through their shortest repr.
    priority_fee is microlamports per compute unit; None uses the configured default.
    """

    sender: WalletSigner
    recipient: Union[Pubkey, str]
    amount: Union[Decimal, int, str, float]
    priority_fee: int | None = None


@dataclass(frozen=True)
class TransferResult:
    """Produced only after network confirmation."""

    signature: str
    slot: int
    block_time: int | None  # Unix seconds; None if the node has no block time
    explorer_url: str


@dataclass(frozen=True)
class TokenBalance:
    """SWELL balance of one owner. amount == raw_amount / 10**decimals; missing account means zero."""

    amount: Decimal
    raw_amount: int
    token_account: Pubkey
    account_exists: bool
    decimals: int


@dataclass(frozen=True)
class TokenAccountResult:
    """Outcome of resolving (and possibly creating) an associated token account."""

    address: Pubkey
    existed: bool
    create_signature: str | None
