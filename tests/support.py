"""Shared fixtures: an app on a fresh in-memory database plus row builders."""

from __future__ import annotations

import unittest
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash

from lottery_app import create_app
from lottery_app.auth import issue_token
from lottery_app.config import TestingConfig
from lottery_app.models import BookedTicket, CartItem, Lottery, Order, PrizeTier, User
from lottery_app.services.settlement_service import new_transaction_id

DRAW_AT = datetime(2030, 1, 15, 18, 0)
DRAW_DAY = date(2030, 1, 15)
NEXT_DAY = date(2030, 1, 16)


class AppTestCase(unittest.TestCase):
    """Each test gets its own app and database.

    Service tests run inside a pushed app context; HTTP tests set
    ``push_context = False`` so every request gets its own ``g``.
    """

    push_context = True

    def setUp(self):
        self.app = create_app(TestingConfig)
        self.Session = self.app.extensions["session_factory"]
        self.ctx = None
        if self.push_context:
            self.ctx = self.app.app_context()
            self.ctx.push()

    def tearDown(self):
        if self.ctx is not None:
            self.ctx.pop()
        self.app.extensions["engine"].dispose()

    def token_for(self, user: User) -> str:
        with self.app.app_context():
            return issue_token(user)

    def auth_headers(self, user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token_for(user)}"}


def make_user(
    session: Session,
    email: str = "user@example.com",
    name: str = "Test User",
    phone: str | None = "9876543210",
    is_admin: bool = False,
) -> User:
    user = User(
        name=name,
        email=email,
        phone=phone,
        password_hash=generate_password_hash("password123"),
        is_admin=is_admin,
    )
    session.add(user)
    session.flush()
    return user


def make_lottery(
    session: Session,
    name: str = "Weekly Draw",
    series_code: str = "WK",
    ticket_price: Decimal = Decimal("50.00"),
    total_tickets: int = 1000,
    number_base: int = 1000,
    status: str = "active",
    prizes: tuple[Decimal, ...] = (Decimal("100000.00"), Decimal("10000.00"), Decimal("1000.00")),
    draw_date: datetime = DRAW_AT,
) -> Lottery:
    lottery = Lottery(
        name=name,
        draw_date=draw_date,
        ticket_price=ticket_price,
        total_tickets=total_tickets,
        series_code=series_code,
        number_base=number_base,
        status=status,
        prize_tiers=[PrizeTier(rank=rank, amount=amount) for rank, amount in enumerate(prizes, start=1)],
    )
    session.add(lottery)
    session.flush()
    return lottery


def make_cart_item(
    session: Session,
    user: User,
    lottery: Lottery,
    ticket_numbers: list[str],
    draw_dates: list[date],
) -> CartItem:
    item = CartItem(
        user_id=user.id,
        lottery_id=lottery.id,
        ticket_numbers=list(ticket_numbers),
        draw_dates=[d.isoformat() for d in draw_dates],
    )
    session.add(item)
    session.flush()
    return item


def book_ticket(session: Session, user: User, lottery: Lottery, number: str, day: date) -> BookedTicket:
    """Insert an already-settled purchase directly."""

    order = Order(
        user_id=user.id,
        lottery_id=lottery.id,
        lottery_name=lottery.name,
        ticket_price=lottery.ticket_price,
        draw_time=day,
        transaction_id=new_transaction_id(),
    )
    session.add(order)
    session.flush()

    ticket = BookedTicket(
        user_id=user.id,
        order_id=order.id,
        lottery_id=lottery.id,
        ticket_number=number,
        draw_date=day,
    )
    session.add(ticket)
    session.flush()
    return ticket
