"""Repository layer for cart persistence."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, joinedload

from lottery_app.models.cart_item import CartItem


class CartRepository:
    """Cart rows are always scoped by owner."""

    def list_for_user(self, session: Session, user_id: str) -> Sequence[CartItem]:
        stmt = (
            select(CartItem)
            .options(joinedload(CartItem.lottery))
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at.asc(), CartItem.id.asc())
        )
        return list(session.scalars(stmt).unique().all())

    def get_owned(self, session: Session, user_id: str, cart_item_id: str) -> CartItem | None:
        stmt = select(CartItem).where(CartItem.id == cart_item_id, CartItem.user_id == user_id)
        return session.scalars(stmt).first()

    def add(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.flush()
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.flush()

    def delete_for_user(self, session: Session, user_id: str) -> int:
        result = session.execute(delete(CartItem).where(CartItem.user_id == user_id))
        return int(result.rowcount or 0)
