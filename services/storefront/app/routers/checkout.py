from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from services.storefront.app.checkout.controller import ORDER_FAILED_MESSAGE, CheckoutController
from services.storefront.app.deps import StorefrontRuntime, get_runtime
from services.storefront.app.models.checkout import (
    CheckoutErrorOut,
    CheckoutUpdateRequest,
    CheckoutView,
)
from services.storefront.app.routers.http_errors import raise_storefront_http_error

router = APIRouter()


def _checkout_view(checkout: CheckoutController) -> CheckoutView:
    config = checkout.points.redemption_config
    error = checkout.last_error
    return CheckoutView(
        state=checkout.state.value,
        payment_methods=checkout.payment_methods,
        selected_payment_method_id=checkout.selected_payment_method_id,
        requested_points=checkout.requested_points,
        points_balance=checkout.points.balance.current_balance,
        redemption_enabled=config.is_usable,
        points_per_currency_unit=config.points_per_currency_unit,
        benefits=checkout.points.benefits,
        breakdown=checkout.breakdown,
        error=CheckoutErrorOut(kind=error.kind.value, message=error.message) if error else None,
        order_id=checkout.order.order_id if checkout.order else None,
    )


def _current(runtime: StorefrontRuntime) -> CheckoutController:
    if runtime.checkout is None:
        raise HTTPException(status_code=404, detail="Checkout not started")
    return runtime.checkout


@router.post("/v1/checkout/load", response_model=CheckoutView)
async def load_checkout(runtime: StorefrontRuntime = Depends(get_runtime)) -> CheckoutView:
    checkout = runtime.new_checkout()
    await checkout.load()
    return _checkout_view(checkout)


@router.get("/v1/checkout", response_model=CheckoutView)
async def get_checkout(runtime: StorefrontRuntime = Depends(get_runtime)) -> CheckoutView:
    return _checkout_view(_current(runtime))


@router.put("/v1/checkout", response_model=CheckoutView)
async def update_checkout(
    payload: CheckoutUpdateRequest, runtime: StorefrontRuntime = Depends(get_runtime)
) -> CheckoutView:
    checkout = _current(runtime)
    try:
        if payload.payment_method_id is not None:
            checkout.select_payment_method(payload.payment_method_id)
        if payload.requested_points is not None:
            checkout.set_requested_points(payload.requested_points)
    except Exception as e:
        raise_storefront_http_error(e)
    return _checkout_view(checkout)


@router.post("/v1/checkout/submit", response_model=CheckoutView)
async def submit_checkout(runtime: StorefrontRuntime = Depends(get_runtime)) -> CheckoutView:
    checkout = _current(runtime)
    try:
        await checkout.submit()
    except Exception as e:
        raise_storefront_http_error(e, ORDER_FAILED_MESSAGE)
    return _checkout_view(checkout)
