"""Declared draw results.

One row per lottery; winners are stored one per rank with the prize amount
copied from the lottery's tier at declaration time.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, SmallInteger, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lottery_app.models.base import Base, new_id, utcnow
from lottery_app.models.lottery import Lottery


class LotteryResult(Base):
    __tablename__ = "lottery_results"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    lottery_id: Mapped[str] = mapped_column(String(36), ForeignKey("lotteries.id"), nullable=False, unique=True)
    lottery_name: Mapped[str] = mapped_column(String(100), nullable=False)
    draw_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    declared_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)
    declared_by: Mapped[str | None] = mapped_column(String(36), ForeignKey("users.id"), nullable=True)

    lottery: Mapped[Lottery] = relationship()
    winners: Mapped[list[ResultWinner]] = relationship(
        back_populates="result",
        order_by="ResultWinner.rank",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def winning_numbers(self) -> list[str]:
        """Winning ticket numbers, first prize first."""

        return [w.ticket_number for w in self.winners]


class ResultWinner(Base):
    __tablename__ = "result_winners"
    __table_args__ = (UniqueConstraint("result_id", "rank", name="uq_result_winner_rank"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    result_id: Mapped[str] = mapped_column(String(36), ForeignKey("lottery_results.id", ondelete="CASCADE"), index=True)
    rank: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    ticket_number: Mapped[str] = mapped_column(String(50), nullable=False)
    prize_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    result: Mapped[LotteryResult] = relationship(back_populates="winners")
