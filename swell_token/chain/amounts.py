"""
SWELL amount conversion and validation.

Fixed-point arithmetic on decimal.Decimal: token amounts are never routed
through binary floats, so raw units are exact for any u64 value and any
decimals the mint can declare (0-255).
"""

from __future__ import annotations

from decimal import (
    ROUND_HALF_UP,
    Decimal,
    DecimalException,
    Inexact,
    InvalidOperation,
    Overflow,
    Rounded,
    Underflow,
    localcontext,
)
from typing import Union

from swell_token.core.errors import SwellErrorCode, SwellTransferError

AmountLike = Union[Decimal, int, str, float]

U64_MAX = 2**64 - 1
# Enough digits for a u64 shifted by the largest decimals a mint can declare
_PRECISION = 300


def parse_amount(amount: AmountLike) -> Decimal:
    """
    Parse a token amount into a Decimal; raise INVALID_AMOUNT if it is not a positive finite number.

    Floats go through repr() so 0.1 parses as Decimal("0.1"), not its binary expansion.
    """
    if isinstance(amount, bool):
        raise SwellTransferError("Transfer amount must be a number", SwellErrorCode.INVALID_AMOUNT)
    try:
        if isinstance(amount, Decimal):
            value = amount
        elif isinstance(amount, float):
            value = Decimal(repr(amount))
        elif isinstance(amount, (int, str)):
            value = Decimal(amount.strip() if isinstance(amount, str) else amount)
        else:
            raise TypeError(type(amount).__name__)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise SwellTransferError(
            f"Transfer amount is not a number: {amount!r}", SwellErrorCode.INVALID_AMOUNT, e
        ) from e
    if not value.is_finite() or value <= 0:
        raise SwellTransferError("Transfer amount must be a positive number", SwellErrorCode.INVALID_AMOUNT)
    return value


def to_raw_amount(amount: AmountLike, decimals: int) -> int:
    """
    Convert token units to raw units: amount * 10**decimals, exactly.

    Raises INVALID_AMOUNT when amount has more fractional digits than the mint
    supports (no silent rounding) or when the result does not fit a u64.
    """
    value = parse_amount(amount)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        # Any rounding, underflow or overflow means the amount is not representable
        for signal in (Inexact, Rounded, Underflow, Overflow):
            ctx.traps[signal] = True
        try:
            scaled = value.scaleb(decimals)
            integral = scaled == scaled.to_integral_value()
        except DecimalException as e:
            raise SwellTransferError(
                f"Amount {amount!r} is out of range for {decimals} decimals",
                SwellErrorCode.INVALID_AMOUNT,
                e,
            ) from e
        if not integral:
            raise SwellTransferError(
                f"Amount {value} has more than {decimals} decimal places",
                SwellErrorCode.INVALID_AMOUNT,
            )
        if scaled > U64_MAX:
            raise SwellTransferError(f"Amount {value} exceeds the token's maximum", SwellErrorCode.INVALID_AMOUNT)
        raw = int(scaled)
    if raw <= 0:
        raise SwellTransferError(f"Amount {value} is below the smallest unit", SwellErrorCode.INVALID_AMOUNT)
    return raw


def from_raw_amount(raw_amount: int, decimals: int) -> Decimal:
    """Convert raw units to token units: raw_amount / 10**decimals, exactly."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(int(raw_amount)).scaleb(-decimals)


def is_valid_transfer_amount(amount: AmountLike, decimals: int) -> bool:
    """True if amount is positive, finite and representable at the token's precision."""
    try:
        to_raw_amount(amount, decimals)
    except SwellTransferError:
        return False
    return True


def format_amount(raw_amount: int, decimals: int, display_decimals: int = 2) -> str:
    """Format raw units for display, e.g. 135500000000 with 9 decimals -> "135.50"."""
    value = from_raw_amount(raw_amount, decimals)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return str(value.quantize(Decimal(1).scaleb(-display_decimals), rounding=ROUND_HALF_UP))
