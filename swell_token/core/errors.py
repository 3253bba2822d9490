"""
Application-level exceptions and error classification.

Responsibilities:
- Define the closed set of SWELL error codes (SwellErrorCode).
- Carry code, message and original cause in SwellTransferError.
- Map low-level RPC/transport failures and wallet rejections onto the taxonomy.

Classification inspects structured solana-py exceptions first and falls back
to substring matching on the message. The fallback is best-effort: an upstream
wording change silently degrades it to NETWORK_ERROR.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from solana.rpc.core import (
    RPCException,
    TransactionExpiredBlockheightExceededError,
    UnconfirmedTxError,
)


class SwellErrorCode(str, Enum):
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    """Sender holds less SWELL than requested, or has no token account."""
    INSUFFICIENT_SOL = "INSUFFICIENT_SOL"
    """Not enough SOL to pay network fees or account rent."""
    INVALID_RECIPIENT = "INVALID_RECIPIENT"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    SIMULATION_FAILED = "SIMULATION_FAILED"
    CONFIRMATION_FAILED = "CONFIRMATION_FAILED"
    USER_REJECTED = "USER_REJECTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    ACCOUNT_CREATION_FAILED = "ACCOUNT_CREATION_FAILED"
    MINT_FETCH_FAILED = "MINT_FETCH_FAILED"
    UNKNOWN = "UNKNOWN"


class SwellTransferError(Exception):
    """Typed error for SWELL operations. Carries a code and the original cause."""

    def __init__(self, message: str, code: SwellErrorCode, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"SwellTransferError(code={self.code.value!r}, message={self.message!r})"


# Wallet-standard / EIP-1193 style "user rejected request"
USER_REJECTED_WALLET_CODE = 4001
_REJECTION_WORDS = ("rejected", "cancelled", "canceled", "denied")

_INSUFFICIENT_SOL_KINDS = ("insufficientfundsforfee", "insufficientfundsforrent")
_EXPIRED_KINDS = ("blockhashnotfound",)


def error_text(exc: BaseException | None) -> str:
    """Message of exc, or 'Unknown error' when it has none."""
    if exc is None:
        return "Unknown error"
    text = str(exc).strip()
    return text or type(exc).__name__


def is_user_rejection(exc: BaseException) -> bool:
    """
    True if a signer failure means the user declined.

    Uses the wallet-standard code 4001 when the exception exposes one,
    else looks for rejected/cancelled/denied wording in the message.
    """
    code = getattr(exc, "code", None)
    if code == USER_REJECTED_WALLET_CODE:
        return True
    message = str(exc).lower()
    return any(word in message for word in _REJECTION_WORDS)


def _rpc_payload_text(exc: RPCException) -> str:
    """Flatten the structured payload of an RPCException (solders RPC error or dict)."""
    parts: list[str] = []
    for arg in exc.args:
        data: Any = getattr(arg, "data", None)
        err = getattr(data, "err", None) if data is not None else None
        if err is not None:
            parts.append(repr(err))
        if isinstance(arg, dict):
            parts.append(repr(arg.get("data", arg)))
        parts.append(str(getattr(arg, "message", "")))
    return " ".join(parts).lower().replace("_", "")


def read_error(exc: BaseException, *, context: str) -> SwellTransferError:
    """
    Wrap a failed chain read as NETWORK_ERROR; already-typed errors pass through.

    Reads never go through the substring heuristics of classify_error: a transport
    message mentioning "expired" is still a network failure, not a confirmation one.
    """
    if isinstance(exc, SwellTransferError):
        return exc
    return SwellTransferError(f"{context}: {error_text(exc)}", SwellErrorCode.NETWORK_ERROR, exc)


def classify_error(exc: BaseException, *, context: str = "Transfer failed") -> SwellTransferError:
    """
    Map a raw failure onto SwellTransferError.

    Already-typed errors pass through unchanged. Structured solana-py errors are
    inspected first; then substring fallback ("insufficient funds" -> INSUFFICIENT_SOL,
    "blockhash not found"/"expired" -> CONFIRMATION_FAILED); otherwise NETWORK_ERROR.
    """
    if isinstance(exc, SwellTransferError):
        return exc

    if isinstance(exc, (TransactionExpiredBlockheightExceededError, UnconfirmedTxError)):
        return SwellTransferError(
            "Transaction expired. Please try again.", SwellErrorCode.CONFIRMATION_FAILED, exc
        )

    if isinstance(exc, RPCException):
        payload = _rpc_payload_text(exc)
        if any(kind in payload for kind in _INSUFFICIENT_SOL_KINDS):
            return SwellTransferError(
                "Insufficient SOL for transaction fees", SwellErrorCode.INSUFFICIENT_SOL, exc
            )
        if any(kind in payload for kind in _EXPIRED_KINDS):
            return SwellTransferError(
                "Transaction expired. Please try again.", SwellErrorCode.CONFIRMATION_FAILED, exc
            )

    message = error_text(exc).lower()
    if "insufficient funds" in message:
        return SwellTransferError("Insufficient SOL for transaction fees", SwellErrorCode.INSUFFICIENT_SOL, exc)
    if "blockhash not found" in message or "expired" in message:
        return SwellTransferError(
            "Transaction expired. Please try again.", SwellErrorCode.CONFIRMATION_FAILED, exc
        )

    return SwellTransferError(f"{context}: {error_text(exc)}", SwellErrorCode.NETWORK_ERROR, exc)
