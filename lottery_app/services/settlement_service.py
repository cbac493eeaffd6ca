"""Settlement: turn the caller's cart into orders and booked tickets.

Runs as one database transaction. Either every (ticket number, draw date)
pair of every cart item becomes an Order plus a BookedTicket and the cart is
emptied, or nothing is written and the cart is left for a retry.

Prices and names are read from the Lottery rows at settlement time, and
transaction ids are generated here; nothing from the request body is used.
"""

from __future__ import annotations

import logging
import secrets
import time
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from flask import current_app, has_app_context
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from lottery_app.errors import (
    AppError,
    EmptyCartError,
    InvalidStateError,
    SettlementFailedError,
    TicketAlreadyBookedError,
)
from lottery_app.models.cart_item import CartItem
from lottery_app.models.order import ORDER_CONFIRMED, BookedTicket, Order
from lottery_app.models.user import User
from lottery_app.repositories.cart_repository import CartRepository
from lottery_app.repositories.order_repository import OrderRepository
from lottery_app.services.cart_service import booked_pairs_detail

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10


def new_transaction_id() -> str:
    """``TXN<epoch millis>-<8 upper hex>``."""

    return f"TXN{int(time.time() * 1000)}-{secrets.token_hex(4).upper()}"


@dataclass
class PurchaseSummary:
    """Tickets bought for one lottery and draw date in a settlement."""

    lottery_id: str
    lottery_name: str
    ticket_price: Decimal
    draw_date: date
    ticket_numbers: list[str] = field(default_factory=list)
    transaction_ids: list[str] = field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        return self.ticket_price * len(self.ticket_numbers)


@dataclass(frozen=True)
class SettlementReceipt:
    user_id: str
    order_ids: list[str]
    purchases: list[PurchaseSummary]

    @property
    def total_amount(self) -> Decimal:
        return sum((p.total_amount for p in self.purchases), Decimal("0"))


def expand_cart(items: Sequence[CartItem]) -> Iterator[tuple[CartItem, str, date]]:
    """Yield (item, ticket number, draw date) in cart, number, date order."""

    for item in items:
        for number in item.ticket_numbers:
            for raw_day in item.draw_dates:
                yield item, number, date.fromisoformat(raw_day)


class SettlementService:
    """The trusted ``process-payment`` operation."""

    def __init__(
        self,
        carts: CartRepository | None = None,
        orders: OrderRepository | None = None,
        transaction_ids: Callable[[], str] = new_transaction_id,
        clock: Callable[[], float] = time.monotonic,
        timeout_seconds: float | None = None,
    ) -> None:
        self._carts = carts or CartRepository()
        self._orders = orders or OrderRepository()
        self._transaction_ids = transaction_ids
        self._clock = clock
        self._timeout_seconds = timeout_seconds

    def _timeout(self) -> float:
        if self._timeout_seconds is not None:
            return float(self._timeout_seconds)
        if has_app_context():
            return float(current_app.config.get("SETTLEMENT_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
        return float(DEFAULT_TIMEOUT_SECONDS)

    def _find_conflicts(self, session: Session, items: Sequence[CartItem]) -> list[dict[str, str]]:
        """Pairs booked by anyone already, or listed twice in this cart."""

        conflicts: list[dict[str, str]] = []
        by_lottery: dict[str, set[tuple[str, date]]] = {}
        for item, number, day in expand_cart(items):
            pairs = by_lottery.setdefault(item.lottery_id, set())
            if (number, day) in pairs:
                conflicts.append({"lottery_id": item.lottery_id, "ticket_number": number, "draw_date": day.isoformat()})
            pairs.add((number, day))

        for lottery_id in sorted(by_lottery):
            taken = self._orders.find_booked_pairs(session, lottery_id, by_lottery[lottery_id])
            for entry in booked_pairs_detail(taken):
                conflicts.append({"lottery_id": lottery_id, **entry})
        return conflicts

    def _next_transaction_id(self, issued: set[str]) -> str:
        txn = self._transaction_ids()
        while txn in issued:
            txn = self._transaction_ids()
        issued.add(txn)
        return txn

    @staticmethod
    def _apply_statement_timeout(session: Session, seconds: float) -> None:
        if session.get_bind().dialect.name == "postgresql":
            session.execute(text(f"SET LOCAL statement_timeout = {int(seconds * 1000)}"))

    def process_payment(self, session: Session, user: User) -> SettlementReceipt:
        items = self._carts.list_for_user(session, user.id)
        if not items:
            raise EmptyCartError()

        logger.info("Processing payment for user %s (%d cart item(s))", user.id, len(items))

        closed = sorted({item.lottery_id for item in items if not item.lottery.is_on_sale})
        if closed:
            raise InvalidStateError(
                message="Cart contains lotteries that are no longer on sale",
                details={"lottery_ids": closed},
            )

        conflicts = self._find_conflicts(session, items)
        if conflicts:
            logger.info("Settlement for user %s rejected: %d pair(s) already booked", user.id, len(conflicts))
            raise TicketAlreadyBookedError(
                message="Some selected tickets are no longer available",
                details=conflicts,
            )

        timeout = self._timeout()
        deadline = self._clock() + timeout
        order_ids: list[str] = []
        issued: set[str] = set()
        purchases: dict[tuple[str, date], PurchaseSummary] = {}

        try:
            self._apply_statement_timeout(session, timeout)

            for item, number, day in expand_cart(items):
                if self._clock() > deadline:
                    logger.error("Settlement for user %s timed out after %d order(s)", user.id, len(order_ids))
                    raise SettlementFailedError(message="Settlement timed out")

                lottery = item.lottery
                txn = self._next_transaction_id(issued)
                order = Order(
                    user_id=user.id,
                    lottery_id=lottery.id,
                    lottery_name=lottery.name,
                    ticket_price=lottery.ticket_price,
                    draw_time=day,
                    transaction_id=txn,
                    status=ORDER_CONFIRMED,
                )
                try:
                    self._orders.add_order(session, order)
                except SQLAlchemyError as exc:
                    logger.error("Order creation failed (cart item %s, ticket %s, step=order): %s", item.id, number, exc)
                    raise SettlementFailedError(message="Failed to create order") from exc

                ticket = BookedTicket(
                    user_id=user.id,
                    order_id=order.id,
                    lottery_id=lottery.id,
                    ticket_number=number,
                    draw_date=day,
                )
                try:
                    self._orders.add_booked_ticket(session, ticket)
                except IntegrityError as exc:
                    logger.warning(
                        "Ticket %s for %s booked concurrently (cart item %s, step=booked_ticket)",
                        number,
                        day.isoformat(),
                        item.id,
                    )
                    raise TicketAlreadyBookedError(
                        message="Some selected tickets are no longer available",
                        details=[{"lottery_id": lottery.id, "ticket_number": number, "draw_date": day.isoformat()}],
                    ) from exc
                except SQLAlchemyError as exc:
                    logger.error("Ticket booking failed (cart item %s, ticket %s, step=booked_ticket): %s", item.id, number, exc)
                    raise SettlementFailedError(message="Failed to book ticket") from exc

                order_ids.append(order.id)
                summary = purchases.get((lottery.id, day))
                if summary is None:
                    summary = PurchaseSummary(
                        lottery_id=lottery.id,
                        lottery_name=lottery.name,
                        ticket_price=lottery.ticket_price,
                        draw_date=day,
                    )
                    purchases[(lottery.id, day)] = summary
                summary.ticket_numbers.append(number)
                summary.transaction_ids.append(txn)

            try:
                self._carts.delete_for_user(session, user.id)
            except SQLAlchemyError as exc:
                logger.error("Failed to clear cart for user %s (step=clear_cart): %s", user.id, exc)
                raise SettlementFailedError(message="Failed to clear cart") from exc

            session.commit()
        except AppError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Settlement commit failed for user %s", user.id)
            raise SettlementFailedError() from exc

        logger.info("Payment processed successfully for user %s. Orders: %d", user.id, len(order_ids))
        return SettlementReceipt(user_id=user.id, order_ids=order_ids, purchases=list(purchases.values()))
