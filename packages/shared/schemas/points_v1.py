"""Shared loyalty points schema (v1).

Benefits unlock once a user's lifetime earned points reach a threshold. Redemption
turns spendable points into a currency discount at a global rate.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import Field

from packages.shared.schemas.common_v1 import CamelModel, WireDecimal


class BenefitKindV1(str, Enum):
    PERCENT_OFF = "ExtraDiscountPercent"
    FIXED_AMOUNT_OFF = "FixedDiscount"
    FREE_SHIPPING_VALUE = "FreeShipping"


class BenefitV1(CamelModel):
    threshold_points: WireDecimal = Field(Decimal("0"), ge=0, alias="pointsThreshold")
    kind: BenefitKindV1 = Field(..., alias="benefitType")
    value: WireDecimal = Field(..., ge=0, alias="benefitValue")
    description: str | None = None

    def qualifies(self, total_earned: Decimal) -> bool:
        return total_earned >= self.threshold_points


class RedemptionConfigV1(CamelModel):
    points_per_currency_unit: int = Field(10, alias="pointsPerRupee")
    enabled: bool = Field(True, alias="isActive")

    @property
    def is_usable(self) -> bool:
        return self.enabled and self.points_per_currency_unit >= 1


class PointsBalanceV1(CamelModel):
    current_balance: WireDecimal = Field(Decimal("0"), ge=0)
    total_points_earned: WireDecimal | None = None
