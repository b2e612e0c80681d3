"""Decimal conversions between sun, TRX and token display units."""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from .config import SUN_PER_TRX, TRX_DECIMALS
from .errors import ErrorCode, FeeError

Numeric = Union[int, str, Decimal]

_TRX_QUANTUM = Decimal(1).scaleb(-TRX_DECIMALS)


def to_decimal(value: Numeric) -> Decimal:
    if isinstance(value, float):
        raise FeeError(ErrorCode.INVALID_AMOUNT, "floats are not accepted, pass str or Decimal")
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise FeeError(ErrorCode.INVALID_AMOUNT, f"not a number: {value!r}") from None
    if not result.is_finite():
        raise FeeError(ErrorCode.INVALID_AMOUNT, f"not a finite number: {value!r}")
    return result


def sun_to_trx(amount_sun: Numeric) -> Decimal:
    return to_decimal(amount_sun) / SUN_PER_TRX


def trx_to_sun(amount_trx: Numeric) -> int:
    return int(to_decimal(amount_trx).scaleb(TRX_DECIMALS).to_integral_value(rounding=ROUND_DOWN))


def to_raw_amount(ui_amount: Numeric, decimals: int) -> int:
    """1.5 with 6 decimals -> 1500000 (extra precision is truncated)."""
    return int(to_decimal(ui_amount).scaleb(decimals).to_integral_value(rounding=ROUND_DOWN))


def to_ui_amount(raw_amount: Numeric, decimals: int) -> Decimal:
    return to_decimal(raw_amount).scaleb(-decimals)


def format_trx(amount_trx: Decimal) -> str:
    """Render with exactly six decimals, e.g. Decimal("0.266") -> "0.266000"."""
    return str(amount_trx.quantize(_TRX_QUANTUM, rounding=ROUND_HALF_UP))


def format_units(amount: int) -> str:
    return str(int(amount))
