from __future__ import annotations

from fastapi import APIRouter, Depends

from services.storefront.app.deps import StorefrontRuntime, get_runtime
from services.storefront.app.models.cart import CartView, LoginRequest
from services.storefront.app.routers.cart import cart_view
from services.storefront.app.routers.http_errors import raise_storefront_http_error

router = APIRouter()


@router.post("/v1/session/login", response_model=CartView)
async def login(payload: LoginRequest, runtime: StorefrontRuntime = Depends(get_runtime)) -> CartView:
    runtime.tokens.token = payload.token
    runtime.close_checkout()
    try:
        await runtime.synchronizer.apply_session()
    except Exception as e:
        raise_storefront_http_error(e, "Could not load your cart")
    return cart_view(runtime)


@router.post("/v1/session/logout", response_model=CartView)
async def logout(runtime: StorefrontRuntime = Depends(get_runtime)) -> CartView:
    runtime.tokens.token = None
    runtime.close_checkout()
    await runtime.synchronizer.apply_session()
    return cart_view(runtime)
