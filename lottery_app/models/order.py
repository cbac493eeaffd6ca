"""Order and booked ticket ORM models.

Both are written once by the settlement engine and never updated.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lottery_app.models.base import Base, new_id, utcnow

ORDER_CONFIRMED = "confirmed"


class Order(Base):
    """One purchased (ticket number, draw date) pair."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    lottery_id: Mapped[str] = mapped_column(String(36), ForeignKey("lotteries.id"), index=True)
    # Snapshots taken at settlement time.
    lottery_name: Mapped[str] = mapped_column(String(100), nullable=False)
    ticket_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    draw_time: Mapped[date] = mapped_column(Date, nullable=False)
    transaction_id: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ORDER_CONFIRMED)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    booked_ticket: Mapped[BookedTicket | None] = relationship(back_populates="order", uselist=False)


class BookedTicket(Base):
    """Proof of purchase; the unit checked against declared results."""

    __tablename__ = "booked_tickets"
    __table_args__ = (
        UniqueConstraint("lottery_id", "draw_date", "ticket_number", name="uq_booked_ticket_draw_number"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    order_id: Mapped[str] = mapped_column(String(36), ForeignKey("orders.id"), nullable=False, unique=True)
    lottery_id: Mapped[str] = mapped_column(String(36), ForeignKey("lotteries.id"), index=True)
    ticket_number: Mapped[str] = mapped_column(String(50), nullable=False)
    draw_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    order: Mapped[Order] = relationship(back_populates="booked_ticket")
