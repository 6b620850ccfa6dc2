from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from packages.shared.schemas.common_v1 import CamelModel, WireDecimal
from packages.shared.schemas.order_v1 import PaymentMethodV1
from packages.shared.schemas.points_v1 import BenefitV1
from packages.shared.schemas.pricing_v1 import PriceBreakdownV1


class CheckoutUpdateRequest(CamelModel):
    requested_points: Decimal | None = None
    payment_method_id: int | None = None


class CheckoutErrorOut(CamelModel):
    kind: str
    message: str


class CheckoutView(CamelModel):
    state: str
    payment_methods: list[PaymentMethodV1] = Field(default_factory=list)
    selected_payment_method_id: int | None = None
    requested_points: WireDecimal
    points_balance: WireDecimal
    redemption_enabled: bool
    points_per_currency_unit: int
    benefits: list[BenefitV1] = Field(default_factory=list)
    breakdown: PriceBreakdownV1
    error: CheckoutErrorOut | None = None
    order_id: int | str | None = None
