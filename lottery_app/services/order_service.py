"""Purchase history reads."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from lottery_app.models.order import BookedTicket, Order
from lottery_app.models.user import User
from lottery_app.repositories.order_repository import OrderRepository


class OrderService:
    def __init__(self, repository: OrderRepository | None = None) -> None:
        self._repo = repository or OrderRepository()

    def orders_for(self, session: Session, user: User) -> Sequence[Order]:
        return self._repo.list_orders_for_user(session, user.id)

    def booked_tickets_for(self, session: Session, user: User) -> Sequence[BookedTicket]:
        return self._repo.list_booked_for_user(session, user.id)
