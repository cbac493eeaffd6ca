"""Payout claims for winning tickets."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy.orm import Session

from lottery_app.errors import ConflictError, InvalidStateError, NotFoundError, ValidationError
from lottery_app.models.base import utcnow
from lottery_app.models.user import User
from lottery_app.models.withdrawal import WithdrawalRequest, WithdrawalStatus
from lottery_app.repositories.order_repository import OrderRepository
from lottery_app.repositories.result_repository import LotteryResultRepository
from lottery_app.repositories.withdrawal_repository import WithdrawalRepository
from lottery_app.services.result_service import winning_entry

logger = logging.getLogger(__name__)

# A booked ticket may back at most one claim in these states.
_OPEN_STATUSES = (WithdrawalStatus.PENDING.value, WithdrawalStatus.APPROVED.value)

_CLAIM_FIELDS = (
    "name",
    "email",
    "bank_name",
    "branch",
    "account_number",
    "ifsc_code",
    "pan_card",
    "aadhar_card",
)


class WithdrawalService:
    def __init__(
        self,
        withdrawals: WithdrawalRepository | None = None,
        orders: OrderRepository | None = None,
        results: LotteryResultRepository | None = None,
    ) -> None:
        self._withdrawals = withdrawals or WithdrawalRepository()
        self._orders = orders or OrderRepository()
        self._results = results or LotteryResultRepository()

    def submit(self, session: Session, user: User, data: Mapping[str, Any]) -> WithdrawalRequest:
        """Create a pending claim from already-validated form data."""

        ticket_id = str(data["booked_ticket_id"])
        ticket = self._orders.get_booked_ticket(session, ticket_id)
        if ticket is None or ticket.user_id != user.id:
            raise ValidationError(details={"booked_ticket_id": ["Unknown ticket"]})

        result = self._results.get_by_lottery(session, ticket.lottery_id)
        entry = winning_entry(result, ticket) if result is not None else None
        if result is None or entry is None:
            raise ValidationError(details={"booked_ticket_id": ["Ticket has not won a prize"]})

        existing = self._withdrawals.find_for_ticket(session, ticket.id, _OPEN_STATUSES)
        if existing is not None:
            raise ConflictError(
                message=f"A {existing.status} withdrawal already exists for this ticket",
                details={"withdrawal_id": existing.id},
            )

        request = WithdrawalRequest(
            user_id=user.id,
            booked_ticket_id=ticket.id,
            result_id=result.id,
            amount=entry.prize_amount,
            status=WithdrawalStatus.PENDING.value,
            **{name: str(data[name]) for name in _CLAIM_FIELDS},
        )
        self._withdrawals.add(session, request)
        logger.info("Withdrawal %s submitted by %s for ticket %s", request.id, user.id, ticket.id)
        return request

    def list_for_user(self, session: Session, user: User) -> Sequence[WithdrawalRequest]:
        return self._withdrawals.list_for_user(session, user.id)

    def list_all(self, session: Session, status: str | None = None) -> Sequence[WithdrawalRequest]:
        return self._withdrawals.list_all(session, status=status)

    def decide(self, session: Session, admin: User, withdrawal_id: str, status: str) -> WithdrawalRequest:
        if status not in (WithdrawalStatus.APPROVED.value, WithdrawalStatus.REJECTED.value):
            raise ValidationError(details={"status": ["Must be one of: approved, rejected."]})

        request = self._withdrawals.get_by_id(session, withdrawal_id)
        if request is None:
            raise NotFoundError(message=f"Withdrawal {withdrawal_id} not found")
        if request.status != WithdrawalStatus.PENDING.value:
            raise InvalidStateError(message=f"Withdrawal already {request.status}")

        request.status = status
        request.processed_at = utcnow()
        request.processed_by = admin.id
        session.flush()
        logger.info("Withdrawal %s %s by %s", request.id, status, admin.id)
        return request
