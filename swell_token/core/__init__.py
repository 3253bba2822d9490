"""
Core types and errors shared by every SWELL component.

Wallet-agnostic value objects (balances, transfer params/results, signer
protocol) and the closed error taxonomy surfaced to callers.
"""

from swell_token.core.errors import (
    SwellErrorCode,
    SwellTransferError,
    classify_error,
    is_user_rejection,
    read_error,
)
from swell_token.core.types import (
    TokenAccountResult,
    TokenBalance,
    TransferParams,
    TransferResult,
    WalletSigner,
)

__all__ = [
    "SwellErrorCode",
    "SwellTransferError",
    "TokenAccountResult",
    "TokenBalance",
    "TransferParams",
    "TransferResult",
    "WalletSigner",
    "classify_error",
    "is_user_rejection",
    "read_error",
]
