"""Shared order schema (v1)."""

from __future__ import annotations

from decimal import Decimal

from pydantic import AliasChoices, Field

from packages.shared.schemas.common_v1 import CamelModel, WireDecimal


class PaymentMethodV1(CamelModel):
    id: int = Field(..., validation_alias=AliasChoices("paymentMethodId", "id"))
    name: str = Field("", validation_alias=AliasChoices("methodName", "name"))


class OrderItemRequestV1(CamelModel):
    product_id: int
    quantity: int = Field(..., ge=1)


class OrderRequestV1(CamelModel):
    items: list[OrderItemRequestV1] = Field(..., min_length=1)
    payment_method_id: int
    points_to_redeem: WireDecimal = Field(Decimal("0"), ge=0)


class OrderCreatedV1(CamelModel):
    order_id: int | str
    total_amount: WireDecimal | None = None
