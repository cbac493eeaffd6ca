"""Repository layer for declared results."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from lottery_app.models.lottery import Lottery
from lottery_app.models.lottery_result import LotteryResult


class LotteryResultRepository:
    """Read/insert operations for lottery results."""

    def get_by_lottery(self, session: Session, lottery_id: str) -> LotteryResult | None:
        stmt = select(LotteryResult).where(LotteryResult.lottery_id == lottery_id)
        return session.scalars(stmt).first()

    def list_for_draws_between(self, session: Session, start: datetime, end: datetime) -> Sequence[LotteryResult]:
        """Results whose lottery draw_date is within ``[start, end]``, newest declaration first."""

        stmt = (
            select(LotteryResult)
            .join(Lottery, Lottery.id == LotteryResult.lottery_id)
            .where(Lottery.draw_date >= start, Lottery.draw_date <= end)
            .order_by(LotteryResult.declared_at.desc())
        )
        return list(session.scalars(stmt).all())

    def add(self, session: Session, result: LotteryResult) -> LotteryResult:
        session.add(result)
        session.flush()
        return result
