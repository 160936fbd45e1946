# cakestore/utils/money.py
"""
VND helpers.

All money is stored and computed as integer dong, there is no fractional
unit. Rounding is ROUND_HALF_UP on a Decimal built from the string form of
the input, so 0.5 -> 1 and 2.5 -> 3 (not banker's rounding). Derived
amounts such as tax are rounded exactly once, in percent_of().
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from cakestore.domain.errors import ValidationError


def _to_decimal(value) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"Not a money amount: {value!r}")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Not a money amount: {value!r}")


def to_vnd(value) -> int:
    """Round any numeric or numeric-string input to whole dong."""
    amount = _to_decimal(value)
    if not amount.is_finite():
        raise ValidationError(f"Not a money amount: {value!r}")
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percent_of(amount: int, rate: Decimal) -> int:
    return to_vnd(Decimal(amount) * _to_decimal(rate))


def _group(value: int) -> str:
    # vi-VN groups thousands with dots
    return f"{value:,}".replace(",", ".")


def format_vnd(value) -> str:
    return _group(to_vnd(value)) + "₫"


def format_vnd_with_label(value) -> str:
    return _group(to_vnd(value)) + " VND"
