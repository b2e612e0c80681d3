"""Amount conversion and rendering."""

from __future__ import annotations

from decimal import Decimal

import pytest

from tron_fees.amounts import format_trx, sun_to_trx, to_decimal, to_raw_amount, to_ui_amount, trx_to_sun
from tron_fees.errors import ErrorCode, FeeError


def test_sun_trx_conversion() -> None:
    assert sun_to_trx(266_000) == Decimal("0.266")
    assert trx_to_sun("1.5") == 1_500_000
    assert trx_to_sun("0.0000019") == 1


def test_raw_amount_truncates_extra_precision() -> None:
    assert to_raw_amount("1.5", 6) == 1_500_000
    assert to_raw_amount("1.23456789", 6) == 1_234_567
    assert to_ui_amount(1_500_000, 6) == Decimal("1.5")


def test_format_trx_has_six_decimals() -> None:
    assert format_trx(Decimal("0.266")) == "0.266000"
    assert format_trx(Decimal(2)) == "2.000000"
    assert format_trx(Decimal("0.0000005")) == "0.000001"


@pytest.mark.parametrize("value", [0.1, "abc", "NaN", "Infinity", None])
def test_to_decimal_rejects(value) -> None:
    with pytest.raises(FeeError) as exc:
        to_decimal(value)
    assert exc.value.code == ErrorCode.INVALID_AMOUNT


def test_fee_error_str() -> None:
    e = FeeError(ErrorCode.HTTP_ERROR, "boom")
    assert str(e) == "HTTP_ERROR(0x0611): boom"
    assert e.code.category.name == "NETWORK"
