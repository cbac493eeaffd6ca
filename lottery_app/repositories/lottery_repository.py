"""Repository layer for lottery persistence."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lottery_app.models.lottery import Lottery


class LotteryRepository:
    """CRUD operations for Lottery."""

    def list(self, session: Session, statuses: Iterable[str] | None = None) -> Sequence[Lottery]:
        stmt = select(Lottery).order_by(Lottery.draw_date.desc())
        if statuses:
            stmt = stmt.where(Lottery.status.in_(list(statuses)))
        return list(session.scalars(stmt).all())

    def get_by_id(self, session: Session, lottery_id: str) -> Lottery | None:
        return session.get(Lottery, lottery_id)

    def add(self, session: Session, lottery: Lottery) -> Lottery:
        session.add(lottery)
        session.flush()
        return lottery

    def count_by_status(self, session: Session, statuses: Iterable[str]) -> int:
        stmt = select(func.count()).select_from(Lottery).where(Lottery.status.in_(list(statuses)))
        return int(session.scalar(stmt) or 0)
