from __future__ import annotations

from pydantic import Field

from packages.shared.schemas.cart_v1 import LineItemV1
from packages.shared.schemas.common_v1 import CamelModel, WireDecimal


class CartAddRequest(CamelModel):
    item: LineItemV1
    quantity: int = 1


class CartQuantityRequest(CamelModel):
    quantity: int


class CartView(CamelModel):
    mode: str
    items: list[LineItemV1] = Field(default_factory=list)
    total_quantity: int
    list_total: WireDecimal
    mrp_total: WireDecimal
    catalog_discount: WireDecimal


class LoginRequest(CamelModel):
    token: str = Field(..., min_length=1)
