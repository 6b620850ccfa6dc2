from decimal import Decimal

from services.storefront.app.pricing.money import (
    clamp,
    clamped_add,
    clamped_subtract,
    floor_units,
    format_currency,
    round_currency,
    to_decimal,
)


def test_to_decimal_keeps_float_text_exact() -> None:
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(None) == Decimal("0")
    assert to_decimal("12.50") == Decimal("12.50")
    assert to_decimal(3) == Decimal("3")


def test_round_currency_is_half_up() -> None:
    assert round_currency(Decimal("19.995")) == Decimal("20.00")
    assert round_currency(Decimal("19.994")) == Decimal("19.99")
    assert round_currency(Decimal("0.005")) == Decimal("0.01")


def test_clamped_subtract_never_goes_negative() -> None:
    assert clamped_subtract(Decimal("10"), Decimal("4")) == Decimal("6")
    assert clamped_subtract(Decimal("10"), Decimal("40")) == Decimal("0")


def test_clamped_add_stops_at_cap() -> None:
    assert clamped_add(Decimal("0"), Decimal("50"), Decimal("180")) == Decimal("50")
    assert clamped_add(Decimal("50"), Decimal("200"), Decimal("180")) == Decimal("180")
    # Already over the cap: pulled back to it.
    assert clamped_add(Decimal("200"), Decimal("10"), Decimal("180")) == Decimal("180")


def test_clamp_and_floor() -> None:
    assert clamp(Decimal("-5"), Decimal("0"), Decimal("10")) == Decimal("0")
    assert clamp(Decimal("15"), Decimal("0"), Decimal("10")) == Decimal("10")
    assert floor_units(Decimal("1799.99")) == Decimal("1799")


def test_format_currency_shows_whole_units() -> None:
    assert format_currency(Decimal("179.5")) == "₹180"
    assert format_currency(Decimal("12"), symbol="$") == "$12"
