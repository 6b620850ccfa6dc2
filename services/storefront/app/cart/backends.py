from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from packages.shared.schemas.cart_v1 import LineItemV1
from services.storefront.app.cart.persistence import LocalCartRepository
from services.storefront.app.cart.store import CartStore
from services.storefront.app.services.storefront_base import StorefrontApi

logger = logging.getLogger(__name__)


class CartBackend(Protocol):
    mode: str

    async def add(self, item: LineItemV1, qty: int) -> None: ...

    async def set_quantity(self, product_id: int, qty: int) -> None: ...

    async def remove(self, product_id: int) -> None: ...

    async def clear(self) -> None: ...


class AnonymousCartBackend:
    """Local-only cart. Every change is written straight to device storage."""

    mode = "anonymous"

    def __init__(self, store: CartStore, repository: LocalCartRepository) -> None:
        self._store = store
        self._repository = repository

    async def add(self, item: LineItemV1, qty: int) -> None:
        self._store.add(item, qty)
        self._repository.save(self._store.items())

    async def set_quantity(self, product_id: int, qty: int) -> None:
        if self._store.set_quantity(product_id, qty):
            self._repository.save(self._store.items())

    async def remove(self, product_id: int) -> None:
        self._store.remove(product_id)
        self._repository.save(self._store.items())

    async def clear(self) -> None:
        self._store.clear()
        self._repository.clear()


class AuthenticatedCartBackend:
    """Server-owned cart. The local store only changes once the server has accepted.

    ``session_epoch`` changes on every login and logout. A reply that arrives after
    the session it was sent for has ended is not applied to the store.
    """

    mode = "authenticated"

    def __init__(
        self,
        store: CartStore,
        api: StorefrontApi,
        session_epoch: Callable[[], int] = lambda: 0,
    ) -> None:
        self._store = store
        self._api = api
        self._session_epoch = session_epoch

    async def add(self, item: LineItemV1, qty: int) -> None:
        epoch = self._session_epoch()
        confirmed = await self._api.add_cart_item(item, qty)
        if self._still_current(epoch, "add", item.product_id):
            self._store.add(_reconcile(item, confirmed), qty)

    async def set_quantity(self, product_id: int, qty: int) -> None:
        epoch = self._session_epoch()
        await self._api.update_cart_item(product_id, qty)
        if self._still_current(epoch, "set_quantity", product_id):
            self._store.set_quantity(product_id, qty)

    async def remove(self, product_id: int) -> None:
        epoch = self._session_epoch()
        await self._api.remove_cart_item(product_id)
        if self._still_current(epoch, "remove", product_id):
            self._store.remove(product_id)

    async def clear(self) -> None:
        epoch = self._session_epoch()
        await self._api.clear_cart()
        if self._still_current(epoch, "clear", None):
            self._store.clear()

    def _still_current(self, epoch: int, op: str, product_id: int | None) -> bool:
        if self._session_epoch() == epoch:
            return True
        logger.info("Session changed during %s of product %s; not applying locally", op, product_id)
        return False


def _reconcile(requested: LineItemV1, confirmed: LineItemV1 | None) -> LineItemV1:
    # The server's price and seller snapshot win; quantity is tracked locally.
    if confirmed is None or confirmed.product_id != requested.product_id:
        return requested
    return requested.model_copy(
        update={
            "product_name": confirmed.product_name or requested.product_name,
            "unit_price": confirmed.unit_price,
            "original_price": confirmed.original_price,
            "image_url": confirmed.image_url or requested.image_url,
            "seller_name": confirmed.seller_name or requested.seller_name,
            "seller_offering_id": confirmed.seller_offering_id or requested.seller_offering_id,
        }
    )
