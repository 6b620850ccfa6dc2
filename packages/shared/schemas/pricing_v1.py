"""Shared price breakdown schema (v1).

The breakdown is an estimate for display. The server recomputes the order total at
settlement and remains the source of truth.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import ConfigDict

from packages.shared.schemas.common_v1 import CamelModel, WireDecimal

_ZERO = Decimal("0")


class PriceBreakdownV1(CamelModel):
    model_config = ConfigDict(frozen=True)

    list_total: WireDecimal = _ZERO
    mrp_total: WireDecimal = _ZERO
    catalog_discount: WireDecimal = _ZERO
    benefit_discount: WireDecimal = _ZERO
    amount_after_benefits: WireDecimal = _ZERO
    max_redeemable_points: WireDecimal = _ZERO
    points_redeemed: WireDecimal = _ZERO
    points_discount: WireDecimal = _ZERO
    payable_total: WireDecimal = _ZERO

    @property
    def total_savings(self) -> Decimal:
        return self.catalog_discount + self.benefit_discount + self.points_discount
