"""Lottery administration and catalogue reads."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from lottery_app.errors import InvalidStateError, NotFoundError, ValidationError
from lottery_app.models.lottery import STATUS_TRANSITIONS, Lottery, LotteryStatus, PrizeTier
from lottery_app.models.user import User
from lottery_app.models.withdrawal import WithdrawalStatus
from lottery_app.repositories.lottery_repository import LotteryRepository
from lottery_app.repositories.order_repository import OrderRepository
from lottery_app.repositories.user_repository import UserRepository
from lottery_app.repositories.withdrawal_repository import WithdrawalRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminStats:
    total_users: int
    active_draws: int
    completed_draws: int
    total_tickets: int
    pending_withdrawals: int


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class LotteryService:
    def __init__(self, repository: LotteryRepository | None = None) -> None:
        self._repo = repository or LotteryRepository()

    def list_lotteries(self, session: Session, status: str | None = None) -> Sequence[Lottery]:
        if status is not None and status not in {s.value for s in LotteryStatus}:
            raise ValidationError(details={"status": [f"Unknown status {status}"]})
        return self._repo.list(session, statuses=[status] if status else None)

    def get_lottery(self, session: Session, lottery_id: str) -> Lottery:
        lottery = self._repo.get_by_id(session, lottery_id)
        if lottery is None:
            raise NotFoundError(message=f"Lottery {lottery_id} not found")
        return lottery

    def create_lottery(self, session: Session, admin: User, data: Mapping[str, Any]) -> Lottery:
        tiers = [PrizeTier(rank=1, amount=data["first_prize"])]
        if data.get("second_prize") is not None:
            tiers.append(PrizeTier(rank=2, amount=data["second_prize"]))
        if data.get("third_prize") is not None:
            tiers.append(PrizeTier(rank=3, amount=data["third_prize"]))

        lottery = Lottery(
            name=str(data["name"]),
            lottery_type=str(data.get("lottery_type") or "weekly"),
            draw_date=_naive_utc(data["draw_date"]),
            ticket_price=data["ticket_price"],
            total_tickets=int(data.get("total_tickets") or 1000),
            series_code=str(data["series_code"]),
            number_base=int(data.get("number_base") or 0),
            status=str(data.get("status") or LotteryStatus.UPCOMING.value),
            image_url=data.get("image_url"),
            prize_tiers=tiers,
        )
        self._repo.add(session, lottery)
        logger.info("Lottery %s (%s) created by %s", lottery.id, lottery.name, admin.id)
        return lottery

    def update_status(self, session: Session, admin: User, lottery_id: str, status: str) -> Lottery:
        lottery = self.get_lottery(session, lottery_id)
        try:
            target = LotteryStatus(status)
        except ValueError as exc:
            raise ValidationError(details={"status": [f"Unknown status {status}"]}) from exc

        current = LotteryStatus(lottery.status)
        if target == current:
            return lottery
        if target not in STATUS_TRANSITIONS[current]:
            raise InvalidStateError(message=f"Cannot move lottery from {current.value} to {target.value}")

        lottery.status = target.value
        session.flush()
        logger.info("Lottery %s status %s -> %s by %s", lottery.id, current.value, target.value, admin.id)
        return lottery


class AdminStatsService:
    """Dashboard counters."""

    def __init__(
        self,
        users: UserRepository | None = None,
        lotteries: LotteryRepository | None = None,
        orders: OrderRepository | None = None,
        withdrawals: WithdrawalRepository | None = None,
    ) -> None:
        self._users = users or UserRepository()
        self._lotteries = lotteries or LotteryRepository()
        self._orders = orders or OrderRepository()
        self._withdrawals = withdrawals or WithdrawalRepository()

    def collect(self, session: Session) -> AdminStats:
        return AdminStats(
            total_users=self._users.count(session),
            active_draws=self._lotteries.count_by_status(
                session, [LotteryStatus.UPCOMING.value, LotteryStatus.ACTIVE.value]
            ),
            completed_draws=self._lotteries.count_by_status(session, [LotteryStatus.COMPLETED.value]),
            total_tickets=self._orders.count_booked(session),
            pending_withdrawals=self._withdrawals.count_by_status(session, WithdrawalStatus.PENDING.value),
        )
