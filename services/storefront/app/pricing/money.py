from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # Go through str so 0.1 stays 0.1.
        return Decimal(str(value))
    return Decimal(value)


def round_currency(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return max(low, min(value, high))


def clamped_subtract(amount: Decimal, deduction: Decimal) -> Decimal:
    """Subtract, bottoming out at zero."""

    return max(ZERO, amount - deduction)


def clamped_add(running: Decimal, amount: Decimal, cap: Decimal) -> Decimal:
    """Add ``amount`` to ``running`` without letting the result pass ``cap``.

    A running total that is already over the cap is pulled back down to it.
    """

    return running + min(amount, cap - running)


def floor_units(amount: Decimal) -> Decimal:
    return amount.to_integral_value(rounding=ROUND_FLOOR)


def format_currency(amount: Decimal, symbol: str = "₹") -> str:
    whole = amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{symbol}{whole}"
