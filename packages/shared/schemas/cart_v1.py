"""Shared cart schema (v1).

A line item is a snapshot of one product in a cart: the price is the one the shopper
saw when adding it, not a live catalog price.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from pydantic import Field

from packages.shared.schemas.common_v1 import CamelModel, WireDecimal


class LineItemV1(CamelModel):
    product_id: int
    product_name: str = ""
    unit_price: WireDecimal = Field(..., ge=0, alias="price")
    # Only meaningful as a markdown when strictly greater than unit_price.
    original_price: WireDecimal | None = None
    quantity: int = Field(1, ge=1)
    image_url: str | None = None
    seller_name: str | None = None
    seller_offering_id: int | None = Field(None, alias="productSellerId")

    @property
    def mrp(self) -> Decimal:
        if self.original_price is not None and self.original_price > self.unit_price:
            return self.original_price
        return self.unit_price

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def discount_percent(self) -> int:
        mrp = self.mrp
        if mrp <= 0 or mrp == self.unit_price:
            return 0
        pct = (mrp - self.unit_price) / mrp * 100
        return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class AddCartItemRequestV1(CamelModel):
    product_id: int
    quantity: int = Field(1, ge=1)
    price: WireDecimal | None = None
    original_price: WireDecimal | None = None
    product_seller_id: int | None = None

    @classmethod
    def from_line_item(cls, item: LineItemV1, quantity: int) -> "AddCartItemRequestV1":
        return cls(
            product_id=item.product_id,
            quantity=quantity,
            price=item.unit_price,
            original_price=item.original_price,
            product_seller_id=item.seller_offering_id,
        )


class UpdateCartItemRequestV1(CamelModel):
    quantity: int = Field(..., ge=1)
