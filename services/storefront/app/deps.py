from __future__ import annotations

from dataclasses import dataclass

from services.storefront.app.cart.persistence import LocalCartRepository
from services.storefront.app.cart.store import CartStore
from services.storefront.app.cart.sync import CartSynchronizer
from services.storefront.app.checkout.controller import CheckoutController
from services.storefront.app.services.storefront_base import StorefrontApi
from services.storefront.app.services.storefront_factory import get_storefront_api
from services.storefront.app.session import SessionContext, TokenHolder


@dataclass
class StorefrontRuntime:
    """Everything one local storefront session needs, wired once."""

    tokens: TokenHolder
    session: SessionContext
    api: StorefrontApi
    synchronizer: CartSynchronizer
    checkout: CheckoutController | None = None

    def new_checkout(self) -> CheckoutController:
        if self.checkout is not None:
            self.checkout.close()
        self.checkout = CheckoutController(self.session, self.synchronizer, self.api)
        return self.checkout

    def close_checkout(self) -> None:
        if self.checkout is not None:
            self.checkout.close()
            self.checkout = None


_RUNTIME: StorefrontRuntime | None = None


def build_runtime() -> StorefrontRuntime:
    tokens = TokenHolder()
    session = SessionContext(tokens)
    api = get_storefront_api(session)
    synchronizer = CartSynchronizer(session, CartStore(), api, LocalCartRepository())
    return StorefrontRuntime(tokens=tokens, session=session, api=api, synchronizer=synchronizer)


def set_runtime(runtime: StorefrontRuntime | None) -> None:
    global _RUNTIME
    _RUNTIME = runtime


def get_runtime() -> StorefrontRuntime:
    if _RUNTIME is None:
        raise RuntimeError("Storefront runtime not started")
    return _RUNTIME
