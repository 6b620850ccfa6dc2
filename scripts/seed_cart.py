from __future__ import annotations

import argparse
from decimal import Decimal

from packages.shared.schemas.cart_v1 import LineItemV1
from services.storefront.app.cart.persistence import LocalCartRepository
from services.storefront.app.cart.store import CartStore
from services.storefront.app.db.init_db import init_db

_DEMO_ITEMS = (
    LineItemV1(
        product_id=101,
        product_name="Cotton Kurta",
        unit_price=Decimal("799"),
        original_price=Decimal("1299"),
        seller_name="Jaipur Handlooms",
        seller_offering_id=11,
    ),
    LineItemV1(product_id=102, product_name="Steel Water Bottle", unit_price=Decimal("349")),
    LineItemV1(
        product_id=103,
        product_name="Basmati Rice 5kg",
        unit_price=Decimal("610"),
        original_price=Decimal("650"),
    ),
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the local anonymous cart with demo items")
    parser.add_argument("--quantity", type=int, default=1)
    parser.add_argument("--replace", action="store_true", help="Drop whatever is saved first")
    args = parser.parse_args()

    init_db()

    repository = LocalCartRepository()
    store = CartStore(() if args.replace else repository.load())
    for item in _DEMO_ITEMS:
        store.add(item, args.quantity)
    repository.save(store.items())

    for item in store.items():
        print(f"{item.product_id}\t{item.quantity} x {item.product_name} @ {item.unit_price}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
