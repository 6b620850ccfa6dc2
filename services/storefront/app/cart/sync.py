"""Keeps the local cart consistent with whichever backend owns it.

Anonymous sessions own their cart on the device. Once the user logs in the server
cart replaces it outright; there is no merge. Mutations for the same product are
queued so that absolute "set quantity" calls reach the server in issue order.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum

from packages.shared.schemas.cart_v1 import LineItemV1
from services.storefront.app.cart.backends import (
    AnonymousCartBackend,
    AuthenticatedCartBackend,
    CartBackend,
)
from services.storefront.app.cart.persistence import LocalCartRepository
from services.storefront.app.cart.store import CartStore
from services.storefront.app.errors import InvalidQuantityError
from services.storefront.app.services.storefront_base import StorefrontApi
from services.storefront.app.session import SessionContext

logger = logging.getLogger(__name__)


class CartMode(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class MutationState(str, Enum):
    IDLE = "IDLE"
    PENDING = "PENDING"


class CartSynchronizer:
    def __init__(
        self,
        session: SessionContext,
        store: CartStore,
        api: StorefrontApi,
        repository: LocalCartRepository,
    ) -> None:
        self._session = session
        self.store = store
        self._api = api
        self._repository = repository

        self.mode = CartMode.ANONYMOUS
        self._epoch = 0

        self._anonymous = AnonymousCartBackend(store, repository)
        self._authenticated = AuthenticatedCartBackend(store, api, lambda: self._epoch)
        self._locks: dict[int, asyncio.Lock] = {}
        self._pending: Counter[int] = Counter()

    @property
    def backend(self) -> CartBackend:
        if self.mode is CartMode.AUTHENTICATED:
            return self._authenticated
        return self._anonymous

    def items(self) -> list[LineItemV1]:
        return self.store.items()

    def mutation_state(self, product_id: int) -> MutationState:
        return MutationState.PENDING if self._pending[product_id] else MutationState.IDLE

    async def start(self) -> None:
        """Populate the store for the session as it stands right now."""

        if self._session.is_authenticated:
            self.mode = CartMode.AUTHENTICATED
            await self.reload()
        else:
            self.mode = CartMode.ANONYMOUS
            self.store.replace_all(self._repository.load())

    async def apply_session(self) -> None:
        authenticated = self._session.is_authenticated
        if authenticated and self.mode is CartMode.ANONYMOUS:
            await self._on_login()
        elif not authenticated and self.mode is CartMode.AUTHENTICATED:
            self._on_logout()

    async def _on_login(self) -> None:
        logger.info("Session authenticated; replacing anonymous cart with server cart")
        self.mode = CartMode.AUTHENTICATED
        self._epoch += 1
        self._repository.clear()
        self.store.clear()
        await self.reload()

    def _on_logout(self) -> None:
        logger.info("Session ended; clearing cart")
        self.mode = CartMode.ANONYMOUS
        self._epoch += 1
        self.store.clear()

    async def reload(self) -> None:
        if self.mode is not CartMode.AUTHENTICATED:
            return
        epoch = self._epoch
        items = await self._api.get_cart()
        if epoch != self._epoch:
            logger.info("Session changed while loading the server cart; discarding it")
            return
        self.store.replace_all(items)
        logger.debug("Loaded %d cart lines from server", len(self.store))

    async def add(self, item: LineItemV1, qty: int = 1) -> None:
        if qty < 1:
            raise InvalidQuantityError(item.product_id, qty)
        async with self._serialized(item.product_id):
            await self.backend.add(item, qty)

    async def set_quantity(self, product_id: int, qty: int) -> None:
        if qty < 1:
            raise InvalidQuantityError(product_id, qty)
        async with self._serialized(product_id):
            await self.backend.set_quantity(product_id, qty)

    async def remove(self, product_id: int) -> None:
        async with self._serialized(product_id):
            await self.backend.remove(product_id)

    async def clear(self) -> None:
        await self.backend.clear()

    @asynccontextmanager
    async def _serialized(self, product_id: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(product_id, asyncio.Lock())
        self._pending[product_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._pending[product_id] -= 1
            if not self._pending[product_id]:
                del self._pending[product_id]
                if not lock.locked():
                    self._locks.pop(product_id, None)
