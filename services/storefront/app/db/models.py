from __future__ import annotations

from sqlalchemy import JSON, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class AnonymousCartItem(Base):
    """One line of the signed-out cart. The whole table is rewritten on every save."""

    __tablename__ = "anonymous_cart_items"

    product_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Display order within the cart.
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    line_item_json: Mapped[dict] = mapped_column(JSON, nullable=False)
