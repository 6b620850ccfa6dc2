"""Checkout price estimation.

Three discount sources stack in a fixed order: catalog markdown, loyalty benefits,
then points redemption. The order matters; each step clamps against what the
previous steps left over.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from packages.shared.schemas.cart_v1 import LineItemV1
from packages.shared.schemas.points_v1 import BenefitKindV1, BenefitV1, RedemptionConfigV1
from packages.shared.schemas.pricing_v1 import PriceBreakdownV1
from services.storefront.app.pricing.money import (
    ZERO,
    clamp,
    clamped_add,
    clamped_subtract,
    floor_units,
    round_currency,
    to_decimal,
)


def compute_breakdown(
    items: Iterable[LineItemV1],
    benefits: Sequence[BenefitV1],
    points_balance: Decimal | None,
    redemption_config: RedemptionConfigV1 | None,
    requested_points: Decimal | int | float | None,
) -> PriceBreakdownV1:
    """Price a cart for display.

    Pure and total: bad or missing inputs are defaulted rather than raised on.
    """

    items = list(items)
    if not items:
        return PriceBreakdownV1()

    list_total = sum((item.unit_price * item.quantity for item in items), ZERO)
    mrp_total = sum((item.mrp * item.quantity for item in items), ZERO)
    catalog_discount = mrp_total - list_total

    benefit_discount = _benefit_discount(list_total, benefits)
    amount_after_benefits = clamped_subtract(list_total, benefit_discount)

    max_redeemable = ZERO
    points_redeemed = ZERO
    points_discount = ZERO
    if redemption_config is not None and redemption_config.is_usable:
        rate = Decimal(redemption_config.points_per_currency_unit)
        balance = max(ZERO, to_decimal(points_balance))
        max_redeemable = min(balance, floor_units(amount_after_benefits * rate))
        points_redeemed = clamp(to_decimal(requested_points), ZERO, max_redeemable)
        points_discount = min(round_currency(points_redeemed / rate), amount_after_benefits)

    payable_total = clamped_subtract(amount_after_benefits, points_discount)

    return PriceBreakdownV1(
        list_total=list_total,
        mrp_total=mrp_total,
        catalog_discount=catalog_discount,
        benefit_discount=benefit_discount,
        amount_after_benefits=amount_after_benefits,
        max_redeemable_points=max_redeemable,
        points_redeemed=points_redeemed,
        points_discount=points_discount,
        payable_total=payable_total,
    )


def _benefit_discount(list_total: Decimal, benefits: Sequence[BenefitV1]) -> Decimal:
    # Percent benefits are taken off the full list total and are not capped; fixed
    # and free-shipping benefits are capped against what is left of the list total.
    running = ZERO
    for benefit in benefits:
        if benefit.kind is BenefitKindV1.PERCENT_OFF:
            running += round_currency(list_total * benefit.value / 100)
        else:
            running = clamped_add(running, benefit.value, list_total)
    return running
