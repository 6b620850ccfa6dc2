"""In-memory cart contents.

The store owns the one-line-per-product and quantity >= 1 invariants. It knows nothing
about persistence or the network; the synchronizer decides when it is mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from packages.shared.schemas.cart_v1 import LineItemV1
from services.storefront.app.errors import InvalidQuantityError

logger = logging.getLogger(__name__)


class CartStore:
    def __init__(self, items: Iterable[LineItemV1] = ()) -> None:
        # dicts keep insertion order, which is the display order.
        self._items: dict[int, LineItemV1] = {}
        self.replace_all(items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._items

    def items(self) -> list[LineItemV1]:
        return list(self._items.values())

    def get(self, product_id: int) -> LineItemV1 | None:
        return self._items.get(product_id)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self._items.values())

    def add(self, item: LineItemV1, qty: int = 1) -> LineItemV1:
        if qty < 1:
            raise InvalidQuantityError(item.product_id, qty)

        existing = self._items.get(item.product_id)
        if existing is None:
            stored = item.model_copy(update={"quantity": qty})
        else:
            stored = existing.model_copy(update={"quantity": existing.quantity + qty})
        self._items[item.product_id] = stored
        return stored

    def set_quantity(self, product_id: int, qty: int) -> bool:
        if qty < 1:
            raise InvalidQuantityError(product_id, qty)

        existing = self._items.get(product_id)
        if existing is None:
            return False
        # Assigning to an existing key keeps its position.
        self._items[product_id] = existing.model_copy(update={"quantity": qty})
        return True

    def remove(self, product_id: int) -> None:
        self._items.pop(product_id, None)

    def clear(self) -> None:
        self._items.clear()

    def replace_all(self, items: Iterable[LineItemV1]) -> None:
        replaced: dict[int, LineItemV1] = {}
        for item in items:
            if item.quantity < 1:
                logger.warning("Dropping cart line %s with quantity %s", item.product_id, item.quantity)
                continue
            seen = replaced.get(item.product_id)
            if seen is not None:
                logger.warning("Folding duplicate cart line for product %s", item.product_id)
                item = seen.model_copy(update={"quantity": seen.quantity + item.quantity})
            replaced[item.product_id] = item
        self._items = replaced
