from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from packages.shared.schemas.cart_v1 import LineItemV1
from services.storefront.app.db.database import db_session
from services.storefront.app.db.models import AnonymousCartItem

logger = logging.getLogger(__name__)


class LocalCartRepository:
    """Device-local storage for the anonymous cart."""

    def __init__(self, session_factory: Callable[[], Session] = db_session) -> None:
        self._session_factory = session_factory

    def load(self) -> list[LineItemV1]:
        db = self._session_factory()
        try:
            rows = db.scalars(select(AnonymousCartItem).order_by(AnonymousCartItem.position)).all()
            items: list[LineItemV1] = []
            for row in rows:
                try:
                    items.append(LineItemV1.model_validate(row.line_item_json))
                except ValidationError as e:
                    logger.warning("Discarding unreadable saved cart line %s: %s", row.product_id, e)
            return items
        finally:
            db.close()

    def save(self, items: Iterable[LineItemV1]) -> None:
        db = self._session_factory()
        try:
            db.execute(delete(AnonymousCartItem))
            for position, item in enumerate(items):
                db.add(
                    AnonymousCartItem(
                        product_id=item.product_id,
                        position=position,
                        line_item_json=item.model_dump(mode="json", by_alias=True),
                    )
                )
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def clear(self) -> None:
        self.save(())
