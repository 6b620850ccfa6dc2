from __future__ import annotations

from typing import Protocol

from packages.shared.schemas.cart_v1 import LineItemV1
from packages.shared.schemas.order_v1 import OrderCreatedV1, OrderRequestV1, PaymentMethodV1
from packages.shared.schemas.points_v1 import BenefitV1, PointsBalanceV1, RedemptionConfigV1


class StorefrontApi(Protocol):
    """Remote storefront endpoints the cart and checkout core depend on.

    Implementations raise the errors in ``services.storefront.app.errors``:
    ``StorefrontNetworkError`` when no answer arrived, ``StorefrontAuthError`` on 401
    and ``StorefrontServerRejection`` for any other non-success status.
    """

    vendor: str

    async def get_cart(self) -> list[LineItemV1]: ...

    async def add_cart_item(self, item: LineItemV1, quantity: int) -> LineItemV1 | None: ...

    async def update_cart_item(self, product_id: int, quantity: int) -> None: ...

    async def remove_cart_item(self, product_id: int) -> None: ...

    async def clear_cart(self) -> None: ...

    async def get_redemption_config(self) -> RedemptionConfigV1: ...

    async def get_points_balance(self) -> PointsBalanceV1: ...

    async def get_benefits(self) -> list[BenefitV1]: ...

    async def get_payment_methods(self) -> list[PaymentMethodV1]: ...

    async def create_order(self, order: OrderRequestV1) -> OrderCreatedV1: ...

    async def aclose(self) -> None: ...
