"""Checkout screen state machine.

Idle -> Loading -> Ready -> Submitting -> Succeeded, with load failures landing in
Failed and submit failures going back to Ready so the user can retry as-is. Pricing
is recomputed from the live cart on every read; it never needs the network.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from packages.shared.schemas.order_v1 import (
    OrderCreatedV1,
    OrderItemRequestV1,
    OrderRequestV1,
    PaymentMethodV1,
)
from packages.shared.schemas.pricing_v1 import PriceBreakdownV1
from services.storefront.app.cart.sync import CartSynchronizer
from services.storefront.app.errors import (
    CheckoutValidationError,
    StorefrontAuthError,
    StorefrontError,
    StorefrontNetworkError,
    StorefrontServerRejection,
    StorefrontValidationError,
)
from services.storefront.app.points.provider import PointsProvider, PointsSnapshot
from services.storefront.app.pricing.engine import compute_breakdown
from services.storefront.app.pricing.money import ZERO, to_decimal
from services.storefront.app.services.storefront_base import StorefrontApi
from services.storefront.app.session import SessionContext

logger = logging.getLogger(__name__)

ORDER_FAILED_MESSAGE = "Failed to place order. Please try again."
LOAD_FAILED_MESSAGE = "Could not load checkout options. Please try again."


class CheckoutState(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    READY = "READY"
    SUBMITTING = "SUBMITTING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class CheckoutErrorKind(str, Enum):
    VALIDATION = "VALIDATION"
    NETWORK = "NETWORK"
    AUTH = "AUTH"
    SERVER_REJECTION = "SERVER_REJECTION"


@dataclass(frozen=True, slots=True)
class CheckoutError:
    kind: CheckoutErrorKind
    message: str


def describe_error(error: Exception, fallback: str) -> CheckoutError:
    if isinstance(error, StorefrontValidationError):
        return CheckoutError(CheckoutErrorKind.VALIDATION, str(error))
    if isinstance(error, StorefrontAuthError):
        return CheckoutError(CheckoutErrorKind.AUTH, str(error))
    if isinstance(error, StorefrontNetworkError):
        return CheckoutError(CheckoutErrorKind.NETWORK, str(error))
    if isinstance(error, StorefrontServerRejection):
        return CheckoutError(CheckoutErrorKind.SERVER_REJECTION, error.server_message or fallback)
    return CheckoutError(CheckoutErrorKind.SERVER_REJECTION, fallback)


class CheckoutController:
    def __init__(
        self,
        session: SessionContext,
        synchronizer: CartSynchronizer,
        api: StorefrontApi,
        points_provider: PointsProvider | None = None,
    ) -> None:
        self._session = session
        self._synchronizer = synchronizer
        self._api = api
        self._points_provider = points_provider or PointsProvider(api)

        self.state = CheckoutState.IDLE
        self.payment_methods: list[PaymentMethodV1] = []
        self.selected_payment_method_id: int | None = None
        self.requested_points: Decimal = ZERO
        self.points = PointsSnapshot()
        self.last_error: CheckoutError | None = None
        self.order: OrderCreatedV1 | None = None

        self._generation = 0
        self._closed = False
        self._load_task: asyncio.Task | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def breakdown(self) -> PriceBreakdownV1:
        return compute_breakdown(
            self._synchronizer.items(),
            self.points.benefits,
            self.points.balance.current_balance,
            self.points.redemption_config,
            self.requested_points,
        )

    async def load(self) -> None:
        if self._closed:
            raise CheckoutValidationError("Checkout screen is closed.")
        if self.state in (CheckoutState.LOADING, CheckoutState.SUBMITTING):
            return

        generation = self._generation
        self.state = CheckoutState.LOADING
        self.last_error = None

        self._load_task = asyncio.ensure_future(self._fetch())
        try:
            methods, points = await self._load_task
        except asyncio.CancelledError:
            if generation == self._generation:
                raise
            logger.debug("Checkout load cancelled by close")
            return
        except StorefrontError as e:
            if generation != self._generation:
                logger.debug("Dropping checkout load failure for a closed screen: %s", e)
                return
            self.state = CheckoutState.FAILED
            self.last_error = describe_error(e, LOAD_FAILED_MESSAGE)
            logger.warning("Checkout load failed: %s", e)
            return
        finally:
            self._load_task = None

        if generation != self._generation:
            logger.debug("Dropping checkout data for a closed screen")
            return

        self.payment_methods = methods
        self.points = points
        if self.selected_payment_method_id not in {m.id for m in methods}:
            self.selected_payment_method_id = methods[0].id if methods else None
        self.state = CheckoutState.READY

    async def _fetch(self) -> tuple[list[PaymentMethodV1], PointsSnapshot]:
        if not self._session.is_authenticated:
            # Points are per user; anonymous shoppers price without them.
            return await self._api.get_payment_methods(), PointsSnapshot()
        methods, points = await asyncio.gather(
            self._api.get_payment_methods(),
            self._points_provider.load(),
        )
        return methods, points

    def set_requested_points(self, points: Decimal | int | float | None) -> PriceBreakdownV1:
        self.requested_points = max(ZERO, to_decimal(points))
        return self.breakdown

    def select_payment_method(self, payment_method_id: int) -> None:
        if payment_method_id not in {m.id for m in self.payment_methods}:
            raise CheckoutValidationError(f"Unknown payment method {payment_method_id}.")
        self.selected_payment_method_id = payment_method_id

    async def submit(self) -> OrderCreatedV1:
        if self._closed:
            raise CheckoutValidationError("Checkout screen is closed.")
        if self.state is not CheckoutState.READY:
            raise CheckoutValidationError(f"Checkout is not ready (state={self.state.value}).")

        items = self._synchronizer.items()
        if not items:
            return self._reject("Your cart is empty. Please add items before checking out.")
        if self.selected_payment_method_id is None:
            return self._reject("Please select a payment method.")

        # Send the clamped redemption, never the raw input.
        breakdown = self.breakdown
        order = OrderRequestV1(
            items=[
                OrderItemRequestV1(product_id=item.product_id, quantity=item.quantity)
                for item in items
            ],
            payment_method_id=self.selected_payment_method_id,
            points_to_redeem=breakdown.points_redeemed,
        )

        self.state = CheckoutState.SUBMITTING
        self.last_error = None
        try:
            created = await self._api.create_order(order)
        except Exception as e:
            self.state = CheckoutState.READY
            self.last_error = describe_error(e, ORDER_FAILED_MESSAGE)
            logger.warning("Order submission failed: %s", e)
            raise

        self.order = created
        logger.info("Order %s placed (payable estimate %s)", created.order_id, breakdown.payable_total)
        try:
            await self._synchronizer.clear()
        except StorefrontError as e:
            logger.warning("Order %s placed but clearing the cart failed: %s", created.order_id, e)

        self.state = CheckoutState.SUCCEEDED
        return created

    def _reject(self, message: str) -> OrderCreatedV1:
        error = CheckoutValidationError(message)
        self.last_error = describe_error(error, message)
        raise error

    def close(self) -> None:
        """Tear the screen down, cancelling a load that is still running."""

        self._closed = True
        self._generation += 1
        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()
