"""Withdrawal (payout claim) ORM model."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from lottery_app.models.base import Base, new_id, utcnow


class WithdrawalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class WithdrawalRequest(Base):
    __tablename__ = "withdrawal_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    booked_ticket_id: Mapped[str] = mapped_column(String(36), ForeignKey("booked_tickets.id"), index=True)
    result_id: Mapped[str] = mapped_column(String(36), ForeignKey("lottery_results.id"))
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    bank_name: Mapped[str] = mapped_column(String(100), nullable=False)
    branch: Mapped[str] = mapped_column(String(100), nullable=False)
    account_number: Mapped[str] = mapped_column(String(18), nullable=False)
    ifsc_code: Mapped[str] = mapped_column(String(11), nullable=False)
    pan_card: Mapped[str] = mapped_column(String(10), nullable=False)
    aadhar_card: Mapped[str] = mapped_column(String(12), nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default=WithdrawalStatus.PENDING.value, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    processed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    processed_by: Mapped[str | None] = mapped_column(String(36), ForeignKey("users.id"), nullable=True)
