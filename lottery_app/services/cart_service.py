"""Cart use-cases."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from flask import current_app
from sqlalchemy.orm import Session

from lottery_app.errors import InvalidStateError, NotFoundError, TicketAlreadyBookedError, ValidationError
from lottery_app.models.base import utcnow
from lottery_app.models.cart_item import CartItem
from lottery_app.models.user import User
from lottery_app.repositories.cart_repository import CartRepository
from lottery_app.repositories.lottery_repository import LotteryRepository
from lottery_app.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartLine:
    """A cart row priced at the lottery's current ticket price (display only)."""

    id: str
    lottery_id: str
    lottery_name: str
    ticket_price: Decimal
    ticket_numbers: list[str]
    draw_dates: list[str]
    line_count: int
    line_total: Decimal
    created_at: datetime


@dataclass(frozen=True)
class CartView:
    lines: list[CartLine]
    total_tickets: int
    total_amount: Decimal


class CartService:
    """Per-user pending selections."""

    def __init__(
        self,
        carts: CartRepository | None = None,
        lotteries: LotteryRepository | None = None,
        orders: OrderRepository | None = None,
    ) -> None:
        self._carts = carts or CartRepository()
        self._lotteries = lotteries or LotteryRepository()
        self._orders = orders or OrderRepository()

    def add_to_cart(
        self,
        session: Session,
        user: User,
        lottery_id: str,
        ticket_numbers: Sequence[str],
        draw_dates: Sequence[date],
        bunch_size: int | None = None,
    ) -> CartItem:
        lottery = self._lotteries.get_by_id(session, lottery_id)
        if lottery is None:
            raise NotFoundError(message=f"Lottery {lottery_id} not found")
        if not lottery.is_on_sale:
            raise InvalidStateError(message=f"Lottery is {lottery.status}; tickets are not on sale")

        numbers = [str(n).strip() for n in ticket_numbers]
        dates = list(draw_dates)
        if not numbers:
            raise ValidationError(details={"ticket_numbers": ["Select at least one ticket"]})
        if not dates:
            raise ValidationError(details={"draw_dates": ["Select at least one draw date"]})
        if len(set(numbers)) != len(numbers):
            raise ValidationError(details={"ticket_numbers": ["Ticket numbers must be unique"]})
        if len(set(dates)) != len(dates):
            raise ValidationError(details={"draw_dates": ["Draw dates must be unique"]})

        limit = int(current_app.config.get("MAX_BUNCH_SIZE", 100))
        if bunch_size is not None:
            limit = min(limit, int(bunch_size))
        if len(numbers) > limit:
            raise ValidationError(
                message="Too many tickets selected",
                details={"ticket_numbers": [f"You can only select {limit} tickets at a time"]},
            )

        max_dates = int(current_app.config.get("MAX_DRAW_DATES", 9))
        if len(dates) > max_dates:
            raise ValidationError(details={"draw_dates": [f"At most {max_dates} draw dates per selection"]})

        today, last = utcnow().date(), lottery.draw_date.date()
        outside = sorted(d for d in dates if not today <= d <= last)
        if outside:
            raise ValidationError(
                message="Invalid draw dates",
                details={
                    "draw_dates": [
                        f"Draw dates must fall between {today.isoformat()} and {last.isoformat()}: "
                        + ", ".join(d.isoformat() for d in outside)
                    ]
                },
            )

        bad = [n for n in numbers if not lottery.number_in_range(n)]
        if bad:
            raise ValidationError(
                message="Invalid ticket numbers",
                details={"ticket_numbers": [f"Not a ticket of this draw: {', '.join(bad)}"]},
            )

        taken = self._orders.find_booked_pairs(session, lottery.id, [(n, d) for n in numbers for d in dates])
        if taken:
            raise TicketAlreadyBookedError(details=booked_pairs_detail(taken))

        item = CartItem(
            user_id=user.id,
            lottery_id=lottery.id,
            ticket_numbers=numbers,
            draw_dates=[d.isoformat() for d in dates],
        )
        self._carts.add(session, item)
        logger.info("User %s added %d ticket(s) x %d date(s) of lottery %s", user.id, len(numbers), len(dates), lottery.id)
        return item

    def remove_from_cart(self, session: Session, user: User, cart_item_id: str) -> None:
        item = self._carts.get_owned(session, user.id, cart_item_id)
        if item is None:
            raise NotFoundError(message=f"Cart item {cart_item_id} not found")
        self._carts.delete(session, item)

    def list_cart(self, session: Session, user: User) -> CartView:
        lines: list[CartLine] = []
        for item in self._carts.list_for_user(session, user.id):
            price = Decimal(item.lottery.ticket_price)
            lines.append(
                CartLine(
                    id=item.id,
                    lottery_id=item.lottery_id,
                    lottery_name=item.lottery.name,
                    ticket_price=price,
                    ticket_numbers=list(item.ticket_numbers),
                    draw_dates=list(item.draw_dates),
                    line_count=item.line_count,
                    line_total=price * item.line_count,
                    created_at=item.created_at,
                )
            )

        return CartView(
            lines=lines,
            total_tickets=sum(line.line_count for line in lines),
            total_amount=sum((line.line_total for line in lines), Decimal("0")),
        )


def booked_pairs_detail(pairs: set[tuple[str, date]]) -> list[dict[str, str]]:
    return [
        {"ticket_number": number, "draw_date": day.isoformat()}
        for number, day in sorted(pairs)
    ]
