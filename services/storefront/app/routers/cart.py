from __future__ import annotations

from fastapi import APIRouter, Depends

from packages.shared.schemas.points_v1 import RedemptionConfigV1
from services.storefront.app.deps import StorefrontRuntime, get_runtime
from services.storefront.app.models.cart import CartAddRequest, CartQuantityRequest, CartView
from services.storefront.app.pricing.engine import compute_breakdown
from services.storefront.app.routers.http_errors import raise_storefront_http_error

router = APIRouter()


def cart_view(runtime: StorefrontRuntime) -> CartView:
    sync = runtime.synchronizer
    items = sync.items()
    breakdown = compute_breakdown(items, [], None, RedemptionConfigV1(enabled=False), None)
    return CartView(
        mode=sync.mode.value,
        items=items,
        total_quantity=sync.store.total_quantity,
        list_total=breakdown.list_total,
        mrp_total=breakdown.mrp_total,
        catalog_discount=breakdown.catalog_discount,
    )


@router.get("/v1/cart", response_model=CartView)
async def get_cart(runtime: StorefrontRuntime = Depends(get_runtime)) -> CartView:
    return cart_view(runtime)


@router.post("/v1/cart/items", response_model=CartView)
async def add_item(
    payload: CartAddRequest, runtime: StorefrontRuntime = Depends(get_runtime)
) -> CartView:
    try:
        await runtime.synchronizer.add(payload.item, payload.quantity)
    except Exception as e:
        raise_storefront_http_error(e, "Could not add item to cart")
    return cart_view(runtime)


@router.put("/v1/cart/items/{product_id}", response_model=CartView)
async def set_quantity(
    product_id: int,
    payload: CartQuantityRequest,
    runtime: StorefrontRuntime = Depends(get_runtime),
) -> CartView:
    try:
        await runtime.synchronizer.set_quantity(product_id, payload.quantity)
    except Exception as e:
        raise_storefront_http_error(e, "Could not update cart")
    return cart_view(runtime)


@router.delete("/v1/cart/items/{product_id}", response_model=CartView)
async def remove_item(
    product_id: int, runtime: StorefrontRuntime = Depends(get_runtime)
) -> CartView:
    try:
        await runtime.synchronizer.remove(product_id)
    except Exception as e:
        raise_storefront_http_error(e, "Could not remove item from cart")
    return cart_view(runtime)


@router.delete("/v1/cart", response_model=CartView)
async def clear_cart(runtime: StorefrontRuntime = Depends(get_runtime)) -> CartView:
    try:
        await runtime.synchronizer.clear()
    except Exception as e:
        raise_storefront_http_error(e, "Could not clear cart")
    return cart_view(runtime)
