"""Ticket number pool for a draw date.

Numbers look like ``<series_code>/<n>``. The pool walks ``n`` upward from a
randomized start inside the lottery's number range, wrapping at the top,
and skips numbers already booked for the same draw date.
"""

from __future__ import annotations

import random
from collections.abc import Collection
from datetime import date

from flask import current_app
from sqlalchemy.orm import Session

from lottery_app.errors import InvalidStateError, NotFoundError, TicketPoolExhaustedError
from lottery_app.models.lottery import Lottery
from lottery_app.repositories.lottery_repository import LotteryRepository
from lottery_app.repositories.order_repository import OrderRepository


def format_ticket_number(prefix: str, n: int) -> str:
    return f"{prefix}/{n}"


def generate_ticket_numbers(
    prefix: str,
    base: int,
    span: int,
    start_offset: int,
    booked: Collection[str],
    count: int,
    max_attempts: int,
) -> list[str]:
    """Return ``count`` unbooked numbers, in walk order.

    At most ``min(span, max_attempts)`` candidates are examined. Raises
    ``TicketPoolExhaustedError`` if the walk ends before ``count`` are found.
    """

    if count <= 0:
        return []
    if span <= 0:
        raise TicketPoolExhaustedError(details={"requested": count, "found": 0})

    out: list[str] = []
    for i in range(min(span, max_attempts)):
        candidate = format_ticket_number(prefix, base + (start_offset + i) % span)
        if candidate in booked:
            continue
        out.append(candidate)
        if len(out) == count:
            return out

    raise TicketPoolExhaustedError(
        message=f"Only {len(out)} of {count} ticket numbers available within search limit",
        details={"requested": count, "found": len(out)},
    )


class TicketService:
    """Candidate ticket numbers for a (lottery, draw date)."""

    def __init__(
        self,
        lotteries: LotteryRepository | None = None,
        orders: OrderRepository | None = None,
    ) -> None:
        self._lotteries = lotteries or LotteryRepository()
        self._orders = orders or OrderRepository()

    def _get_on_sale(self, session: Session, lottery_id: str) -> Lottery:
        lottery = self._lotteries.get_by_id(session, lottery_id)
        if lottery is None:
            raise NotFoundError(message=f"Lottery {lottery_id} not found")
        if not lottery.is_on_sale:
            raise InvalidStateError(message=f"Lottery is {lottery.status}; tickets are not on sale")
        return lottery

    def available_numbers(
        self,
        session: Session,
        lottery_id: str,
        draw_date: date,
        rng: random.Random | None = None,
    ) -> list[str]:
        lottery = self._get_on_sale(session, lottery_id)
        booked = self._orders.booked_numbers(session, lottery.id, draw_date)

        span = int(lottery.total_tickets)
        remaining = span - len(booked)
        if remaining <= 0:
            raise TicketPoolExhaustedError(message="All tickets for this draw date are booked")

        pool_size = int(current_app.config.get("TICKET_POOL_SIZE", 100))
        search_limit = int(current_app.config.get("TICKET_SEARCH_LIMIT", 10_000))
        start_offset = (rng or random).randrange(span)

        return generate_ticket_numbers(
            prefix=lottery.series_code,
            base=int(lottery.number_base),
            span=span,
            start_offset=start_offset,
            booked=booked,
            count=min(pool_size, remaining),
            max_attempts=search_limit,
        )
