"""Repository layer for withdrawal requests."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lottery_app.models.withdrawal import WithdrawalRequest


class WithdrawalRepository:
    """CRUD operations for WithdrawalRequest."""

    def add(self, session: Session, request: WithdrawalRequest) -> WithdrawalRequest:
        session.add(request)
        session.flush()
        return request

    def get_by_id(self, session: Session, withdrawal_id: str) -> WithdrawalRequest | None:
        return session.get(WithdrawalRequest, withdrawal_id)

    def list_for_user(self, session: Session, user_id: str) -> Sequence[WithdrawalRequest]:
        stmt = (
            select(WithdrawalRequest)
            .where(WithdrawalRequest.user_id == user_id)
            .order_by(WithdrawalRequest.created_at.desc())
        )
        return list(session.scalars(stmt).all())

    def list_all(self, session: Session, status: str | None = None) -> Sequence[WithdrawalRequest]:
        stmt = select(WithdrawalRequest).order_by(WithdrawalRequest.created_at.desc())
        if status:
            stmt = stmt.where(WithdrawalRequest.status == status)
        return list(session.scalars(stmt).all())

    def find_for_ticket(
        self,
        session: Session,
        booked_ticket_id: str,
        statuses: Iterable[str],
    ) -> WithdrawalRequest | None:
        stmt = select(WithdrawalRequest).where(
            WithdrawalRequest.booked_ticket_id == booked_ticket_id,
            WithdrawalRequest.status.in_(list(statuses)),
        )
        return session.scalars(stmt).first()

    def count_by_status(self, session: Session, status: str) -> int:
        stmt = select(func.count()).select_from(WithdrawalRequest).where(WithdrawalRequest.status == status)
        return int(session.scalar(stmt) or 0)
