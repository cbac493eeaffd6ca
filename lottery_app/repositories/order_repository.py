"""Repository layer for orders and booked tickets."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lottery_app.models.order import BookedTicket, Order


class OrderRepository:
    """Insert-only access to orders and booked tickets, plus history reads."""

    def add_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        return order

    def add_booked_ticket(self, session: Session, ticket: BookedTicket) -> BookedTicket:
        session.add(ticket)
        session.flush()
        return ticket

    def booked_numbers(self, session: Session, lottery_id: str, draw_date: date) -> set[str]:
        stmt = select(BookedTicket.ticket_number).where(
            BookedTicket.lottery_id == lottery_id,
            BookedTicket.draw_date == draw_date,
        )
        return set(session.scalars(stmt).all())

    def find_booked_pairs(
        self,
        session: Session,
        lottery_id: str,
        pairs: Iterable[tuple[str, date]],
    ) -> set[tuple[str, date]]:
        """Return which of ``pairs`` (ticket number, draw date) are already booked."""

        wanted = set(pairs)
        if not wanted:
            return set()
        stmt = select(BookedTicket.ticket_number, BookedTicket.draw_date).where(
            BookedTicket.lottery_id == lottery_id,
            BookedTicket.ticket_number.in_(sorted({number for number, _ in wanted})),
            BookedTicket.draw_date.in_(sorted({day for _, day in wanted})),
        )
        found = {(row[0], row[1]) for row in session.execute(stmt).all()}
        return found & wanted

    def list_orders_for_user(self, session: Session, user_id: str) -> Sequence[Order]:
        stmt = select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc())
        return list(session.scalars(stmt).all())

    def list_booked_for_user(self, session: Session, user_id: str) -> Sequence[BookedTicket]:
        stmt = (
            select(BookedTicket)
            .where(BookedTicket.user_id == user_id)
            .order_by(BookedTicket.created_at.desc())
        )
        return list(session.scalars(stmt).all())

    def get_booked_ticket(self, session: Session, ticket_id: str) -> BookedTicket | None:
        return session.get(BookedTicket, ticket_id)

    def count_booked(self, session: Session) -> int:
        return int(session.scalar(select(func.count()).select_from(BookedTicket)) or 0)
