"""Ticket confirmation messages over the WhatsApp Cloud API.

Delivery is best-effort: settlement never waits on or rolls back because of it.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import requests
from flask import current_app
from requests.adapters import HTTPAdapter
from sqlalchemy.orm import Session
from urllib3.util.retry import Retry

from lottery_app.errors import NotFoundError, NotificationError, ValidationError
from lottery_app.repositories.user_repository import UserRepository
from lottery_app.services.settlement_service import SettlementReceipt

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class TicketDetails:
    lottery_name: str
    ticket_numbers: list[str]
    draw_date: str
    transaction_id: str
    ticket_price: Decimal
    total_amount: Decimal


def format_phone(raw: str, default_country_code: str = "91") -> str:
    """Digits only; 10-digit local numbers get the default country code."""

    digits = _NON_DIGITS.sub("", raw or "")
    if len(digits) == 10 and not digits.startswith(default_country_code):
        digits = default_country_code + digits
    return digits


def _money(value: Decimal) -> str:
    return f"{Decimal(value):,.2f}".rstrip("0").rstrip(".")


def render_message(customer_name: str | None, details: TicketDetails) -> str:
    return (
        "\U0001F39F️ *Lottery Ticket Confirmation*\n\n"
        f"Hello {customer_name or 'Customer'}!\n\n"
        "Your lottery ticket purchase has been confirmed.\n\n"
        "\U0001F4CB *Details:*\n"
        f"• Lottery: {details.lottery_name}\n"
        f"• Ticket Numbers: {', '.join(details.ticket_numbers)}\n"
        f"• Draw Date: {details.draw_date}\n"
        f"• Transaction ID: {details.transaction_id}\n\n"
        "\U0001F4B0 *Payment:*\n"
        f"• Price per Ticket: ₹{_money(details.ticket_price)}\n"
        f"• Total Amount: ₹{_money(details.total_amount)}\n\n"
        "Good luck! \U0001F340\n\n"
        "Thank you for choosing us."
    )


def _build_http_session(retries: int, backoff_factor: float) -> requests.Session:
    """Retry only on throttling/unavailable so a message is not sent twice."""

    retry = Retry(
        total=retries,
        connect=retries,
        read=0,
        status=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 503),
        allowed_methods=frozenset({"POST"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)

    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class WhatsAppNotifier:
    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        api_base: str = "https://graph.facebook.com/v18.0",
        default_country_code: str = "91",
        http: requests.Session | None = None,
        timeout_seconds: float = 10.0,
        users: UserRepository | None = None,
    ) -> None:
        self.access_token = access_token
        self.phone_number_id = phone_number_id
        self.api_base = api_base.rstrip("/")
        self.default_country_code = default_country_code
        self.timeout_seconds = timeout_seconds
        self._http = http or _build_http_session(retries=2, backoff_factor=0.5)
        self._users = users or UserRepository()

    @classmethod
    def from_config(cls, config: Mapping[str, Any], http: requests.Session | None = None) -> WhatsAppNotifier:
        return cls(
            access_token=str(config.get("WHATSAPP_ACCESS_TOKEN") or ""),
            phone_number_id=str(config.get("WHATSAPP_PHONE_NUMBER_ID") or ""),
            api_base=str(config.get("WHATSAPP_API_BASE") or "https://graph.facebook.com/v18.0"),
            default_country_code=str(config.get("DEFAULT_COUNTRY_CODE") or "91"),
            http=http,
        )

    @property
    def configured(self) -> bool:
        return bool(self.access_token and self.phone_number_id)

    def send_ticket_confirmation(self, session: Session, user_id: str, details: TicketDetails) -> str | None:
        """Send the confirmation to the user's stored phone; returns the message id."""

        if not self.configured:
            raise NotificationError(message="WhatsApp not configured")

        user = self._users.get_by_id(session, user_id)
        if user is None:
            raise NotFoundError(message="User profile not found")
        if not user.phone:
            raise ValidationError(message="Phone number not available", details={"phone": ["Phone number not available"]})

        payload = {
            "messaging_product": "whatsapp",
            "to": format_phone(user.phone, self.default_country_code),
            "type": "text",
            "text": {"preview_url": False, "body": render_message(user.name, details)},
        }
        url = f"{self.api_base}/{self.phone_number_id}/messages"
        try:
            resp = self._http.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {self.access_token}"},
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise NotificationError(details=str(exc)) from exc

        try:
            body: dict[str, Any] = resp.json()
        except ValueError:
            body = {}

        if not resp.ok:
            logger.error("WhatsApp API error %s: %s", resp.status_code, body)
            raise NotificationError(message="Failed to send WhatsApp message", details=body or None)

        messages = body.get("messages") or [{}]
        message_id = messages[0].get("id")
        logger.info("WhatsApp message %s sent to user %s", message_id, user_id)
        return message_id


def current_notifier() -> WhatsAppNotifier:
    """The app's notifier, built from config on first use."""

    notifier = current_app.extensions.get("notifier")
    if notifier is None:
        notifier = WhatsAppNotifier.from_config(current_app.config)
        current_app.extensions["notifier"] = notifier
    return notifier


def notify_settlement(session: Session, notifier: WhatsAppNotifier, receipt: SettlementReceipt) -> int:
    """Send one confirmation per lottery/draw date; failures are only logged."""

    if not notifier.configured:
        logger.info("WhatsApp not configured; skipping confirmations for user %s", receipt.user_id)
        return 0

    sent = 0
    for purchase in receipt.purchases:
        details = TicketDetails(
            lottery_name=purchase.lottery_name,
            ticket_numbers=list(purchase.ticket_numbers),
            draw_date=purchase.draw_date.isoformat(),
            transaction_id=", ".join(purchase.transaction_ids),
            ticket_price=purchase.ticket_price,
            total_amount=purchase.total_amount,
        )
        try:
            notifier.send_ticket_confirmation(session, receipt.user_id, details)
        except (NotificationError, NotFoundError, ValidationError) as exc:
            logger.warning("Ticket confirmation for user %s not sent: %s", receipt.user_id, exc.message)
            continue
        sent += 1
    return sent
