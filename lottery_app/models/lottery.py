"""Lottery (draw) and prize tier ORM models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, SmallInteger, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lottery_app.models.base import Base, new_id, utcnow


class LotteryType(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    SPECIAL = "special"
    BUMPER = "bumper"


class LotteryStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Allowed admin transitions; completed/cancelled are terminal.
STATUS_TRANSITIONS: dict[LotteryStatus, frozenset[LotteryStatus]] = {
    LotteryStatus.UPCOMING: frozenset({LotteryStatus.ACTIVE, LotteryStatus.CANCELLED}),
    LotteryStatus.ACTIVE: frozenset({LotteryStatus.COMPLETED, LotteryStatus.CANCELLED}),
    LotteryStatus.COMPLETED: frozenset(),
    LotteryStatus.CANCELLED: frozenset(),
}

ON_SALE_STATUSES = frozenset({LotteryStatus.UPCOMING.value, LotteryStatus.ACTIVE.value})


class Lottery(Base):
    """A scheduled draw.

    Ticket numbers for the draw have the form ``<series_code>/<n>`` with
    ``number_base <= n < number_base + total_tickets``.
    """

    __tablename__ = "lotteries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    lottery_type: Mapped[str] = mapped_column(String(20), nullable=False, default=LotteryType.WEEKLY.value)
    draw_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    ticket_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_tickets: Mapped[int] = mapped_column(Integer, nullable=False, default=1000)
    series_code: Mapped[str] = mapped_column(String(20), nullable=False)
    number_base: Mapped[int] = mapped_column(Integer, nullable=False, default=1000)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=LotteryStatus.UPCOMING.value, index=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    prize_tiers: Mapped[list[PrizeTier]] = relationship(
        back_populates="lottery",
        order_by="PrizeTier.rank",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def is_on_sale(self) -> bool:
        return self.status in ON_SALE_STATUSES

    def prize_for_rank(self, rank: int) -> Decimal | None:
        for tier in self.prize_tiers:
            if tier.rank == rank:
                return tier.amount
        return None

    def number_in_range(self, ticket_number: str) -> bool:
        prefix, sep, tail = ticket_number.partition("/")
        if not sep or prefix != self.series_code or not tail.isdigit():
            return False
        n = int(tail)
        return self.number_base <= n < self.number_base + self.total_tickets


class PrizeTier(Base):
    """Explicit payout for one rank (1 = first prize) of a lottery."""

    __tablename__ = "prize_tiers"
    __table_args__ = (UniqueConstraint("lottery_id", "rank", name="uq_prize_tier_rank"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lottery_id: Mapped[str] = mapped_column(String(36), ForeignKey("lotteries.id", ondelete="CASCADE"), index=True)
    rank: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    lottery: Mapped[Lottery] = relationship(back_populates="prize_tiers")
