from __future__ import annotations

from decimal import Decimal
from itertools import count

from packages.shared.schemas.cart_v1 import LineItemV1
from packages.shared.schemas.order_v1 import OrderCreatedV1, OrderRequestV1, PaymentMethodV1
from packages.shared.schemas.points_v1 import (
    BenefitKindV1,
    BenefitV1,
    PointsBalanceV1,
    RedemptionConfigV1,
)
from services.storefront.app.errors import StorefrontAuthError, StorefrontServerRejection
from services.storefront.app.session import SessionContext


class MockStorefrontApi:
    """Deterministic in-memory storefront backend for local dev and tests."""

    vendor = "STOREFRONT_MOCK"

    def __init__(self, session: SessionContext) -> None:
        self._session = session
        self._cart: dict[int, LineItemV1] = {}
        self._order_ids = count(1001)
        self.orders: list[OrderRequestV1] = []

        self.redemption_config = RedemptionConfigV1(points_per_currency_unit=10, enabled=True)
        self.balance = PointsBalanceV1(
            current_balance=Decimal("500"), total_points_earned=Decimal("1200")
        )
        self.benefits = [
            BenefitV1(
                threshold_points=Decimal("1000"),
                kind=BenefitKindV1.PERCENT_OFF,
                value=Decimal("5"),
                description="5% off for Silver members",
            )
        ]
        self.payment_methods = [
            PaymentMethodV1(id=1, name="Cash on Delivery"),
            PaymentMethodV1(id=2, name="QR Code Payment"),
        ]

    def _require_auth(self) -> None:
        if not self._session.is_authenticated:
            raise StorefrontAuthError()

    async def aclose(self) -> None:
        return None

    async def get_cart(self) -> list[LineItemV1]:
        self._require_auth()
        return list(self._cart.values())

    async def add_cart_item(self, item: LineItemV1, quantity: int) -> LineItemV1 | None:
        self._require_auth()
        existing = self._cart.get(item.product_id)
        if existing is not None:
            stored = existing.model_copy(update={"quantity": existing.quantity + quantity})
        else:
            stored = item.model_copy(update={"quantity": quantity})
        self._cart[item.product_id] = stored
        return stored

    async def update_cart_item(self, product_id: int, quantity: int) -> None:
        self._require_auth()
        existing = self._cart.get(product_id)
        if existing is None:
            raise StorefrontServerRejection(404, "Cart item not found.")
        self._cart[product_id] = existing.model_copy(update={"quantity": quantity})

    async def remove_cart_item(self, product_id: int) -> None:
        self._require_auth()
        self._cart.pop(product_id, None)

    async def clear_cart(self) -> None:
        self._require_auth()
        self._cart.clear()

    async def get_redemption_config(self) -> RedemptionConfigV1:
        return self.redemption_config

    async def get_points_balance(self) -> PointsBalanceV1:
        self._require_auth()
        return self.balance

    async def get_benefits(self) -> list[BenefitV1]:
        self._require_auth()
        return list(self.benefits)

    async def get_payment_methods(self) -> list[PaymentMethodV1]:
        return list(self.payment_methods)

    async def create_order(self, order: OrderRequestV1) -> OrderCreatedV1:
        self._require_auth()
        if order.points_to_redeem > self.balance.current_balance:
            raise StorefrontServerRejection(400, "Insufficient points balance.")
        self.orders.append(order)
        return OrderCreatedV1(order_id=next(self._order_ids))
