"""Declared results and winning-ticket determination."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol

from sqlalchemy.orm import Session

from lottery_app.errors import ConflictError, InvalidStateError, NotFoundError, ValidationError
from lottery_app.models.lottery import LotteryStatus
from lottery_app.models.lottery_result import LotteryResult, ResultWinner
from lottery_app.models.order import BookedTicket
from lottery_app.models.user import User
from lottery_app.repositories.lottery_repository import LotteryRepository
from lottery_app.repositories.order_repository import OrderRepository
from lottery_app.repositories.result_repository import LotteryResultRepository
from lottery_app.utils.dates import day_bounds

logger = logging.getLogger(__name__)


class HasWinningNumbers(Protocol):
    @property
    def winning_numbers(self) -> Sequence[str]: ...


def compute_winning_tickets(
    user_ticket_numbers: Iterable[str],
    results: Iterable[HasWinningNumbers],
) -> set[str]:
    """Winning numbers (any rank, any result) that the user holds."""

    held = set(user_ticket_numbers)
    won: set[str] = set()
    for result in results:
        for number in result.winning_numbers:
            if number in held:
                won.add(number)
    return won


@dataclass(frozen=True)
class WinningTicket:
    booked_ticket_id: str
    lottery_id: str
    lottery_name: str
    ticket_number: str
    draw_date: date
    rank: int
    prize_amount: Decimal


@dataclass(frozen=True)
class Winnings:
    results: list[LotteryResult]
    ticket_numbers: list[str]
    winning_numbers: list[str]
    tickets: list[WinningTicket]

    @property
    def has_won(self) -> bool:
        return bool(self.winning_numbers)


def winning_entry(result: LotteryResult, ticket: BookedTicket) -> ResultWinner | None:
    """The result row won by ``ticket``, if the ticket is for the same draw."""

    if ticket.lottery_id != result.lottery_id or ticket.draw_date != result.draw_date.date():
        return None
    for winner in result.winners:
        if winner.ticket_number == ticket.ticket_number:
            return winner
    return None


class ResultService:
    """Result declaration (admin) and result/winnings queries."""

    def __init__(
        self,
        results: LotteryResultRepository | None = None,
        lotteries: LotteryRepository | None = None,
        orders: OrderRepository | None = None,
    ) -> None:
        self._results = results or LotteryResultRepository()
        self._lotteries = lotteries or LotteryRepository()
        self._orders = orders or OrderRepository()

    def fetch_results_for_date(self, session: Session, day: date) -> list[LotteryResult]:
        return self.fetch_results_between(session, day, day)

    def fetch_results_between(self, session: Session, start: date, end: date) -> list[LotteryResult]:
        lower, upper = day_bounds(start, end)
        return list(self._results.list_for_draws_between(session, lower, upper))

    def winnings_for_user(self, session: Session, user: User, start: date, end: date | None = None) -> Winnings:
        results = self.fetch_results_between(session, start, end or start)
        booked = list(self._orders.list_booked_for_user(session, user.id))
        numbers = sorted({t.ticket_number for t in booked})

        won = compute_winning_tickets(numbers, results)

        tickets: list[WinningTicket] = []
        if won:
            by_lottery = {r.lottery_id: r for r in results}
            for ticket in booked:
                result = by_lottery.get(ticket.lottery_id)
                entry = winning_entry(result, ticket) if result is not None else None
                if entry is None:
                    continue
                tickets.append(
                    WinningTicket(
                        booked_ticket_id=ticket.id,
                        lottery_id=ticket.lottery_id,
                        lottery_name=result.lottery_name,
                        ticket_number=ticket.ticket_number,
                        draw_date=ticket.draw_date,
                        rank=int(entry.rank),
                        prize_amount=entry.prize_amount,
                    )
                )
            tickets.sort(key=lambda t: (t.rank, t.ticket_number, t.draw_date))

        return Winnings(
            results=results,
            ticket_numbers=numbers,
            winning_numbers=sorted(won),
            tickets=tickets,
        )

    def declare_result(
        self,
        session: Session,
        admin: User,
        lottery_id: str,
        winning_numbers: Sequence[str],
    ) -> LotteryResult:
        """Record the winners of a draw and complete the lottery."""

        lottery = self._lotteries.get_by_id(session, lottery_id)
        if lottery is None:
            raise NotFoundError(message=f"Lottery {lottery_id} not found")
        if lottery.status in (LotteryStatus.COMPLETED.value, LotteryStatus.CANCELLED.value):
            raise InvalidStateError(message=f"Cannot declare a result for a {lottery.status} lottery")
        if self._results.get_by_lottery(session, lottery.id) is not None:
            raise ConflictError(message="Result already declared for this lottery")

        numbers = [str(n).strip() for n in winning_numbers]
        if not 1 <= len(numbers) <= 3:
            raise ValidationError(details={"winning_numbers": ["Provide 1 to 3 winning numbers"]})
        if len(set(numbers)) != len(numbers):
            raise ValidationError(details={"winning_numbers": ["Winning numbers must be unique"]})
        bad = [n for n in numbers if not lottery.number_in_range(n)]
        if bad:
            raise ValidationError(details={"winning_numbers": [f"Not a ticket of this draw: {', '.join(bad)}"]})

        winners: list[ResultWinner] = []
        for rank, number in enumerate(numbers, start=1):
            amount = lottery.prize_for_rank(rank)
            if amount is None:
                raise ValidationError(details={"winning_numbers": [f"Lottery has no prize tier {rank}"]})
            winners.append(ResultWinner(rank=rank, ticket_number=number, prize_amount=amount))

        result = LotteryResult(
            lottery_id=lottery.id,
            lottery_name=lottery.name,
            draw_date=lottery.draw_date,
            declared_by=admin.id,
            winners=winners,
        )
        self._results.add(session, result)
        lottery.status = LotteryStatus.COMPLETED.value
        session.flush()

        logger.info("Result declared for lottery %s by %s: %s", lottery.id, admin.id, ", ".join(numbers))
        return result
