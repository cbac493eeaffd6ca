"""Cart item ORM model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lottery_app.models.base import Base, new_id, utcnow
from lottery_app.models.lottery import Lottery


class CartItem(Base):
    """Pending selection: every number is bought for every listed draw date."""

    __tablename__ = "cart_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True)
    lottery_id: Mapped[str] = mapped_column(String(36), ForeignKey("lotteries.id"), index=True)
    ticket_numbers: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    # ISO dates (YYYY-MM-DD)
    draw_dates: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    lottery: Mapped[Lottery] = relationship()

    @property
    def line_count(self) -> int:
        return len(self.ticket_numbers) * len(self.draw_dates)
