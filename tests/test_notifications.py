import unittest
from datetime import date
from decimal import Decimal

import requests

from support import AppTestCase, make_user

from lottery_app.errors import NotFoundError, NotificationError, ValidationError
from lottery_app.services.notification_service import (
    TicketDetails,
    WhatsAppNotifier,
    format_phone,
    notify_settlement,
    render_message,
)
from lottery_app.services.settlement_service import PurchaseSummary, SettlementReceipt

DETAILS = TicketDetails(
    lottery_name="Weekly Draw",
    ticket_numbers=["WK/1001", "WK/1002"],
    draw_date="2026-01-15",
    transaction_id="TXN1-AAAAAAAA",
    ticket_price=Decimal("50.00"),
    total_amount=Decimal("100.00"),
)


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self.ok = status_code < 400
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(200, {"messages": [{"id": "wamid.1"}]})
        self.error = error
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class FormattingTestCase(unittest.TestCase):
    def test_format_phone(self):
        self.assertEqual(format_phone("9876543210"), "919876543210")
        self.assertEqual(format_phone("+91 98765-43210"), "919876543210")
        self.assertEqual(format_phone("(415) 555-0123", default_country_code="1"), "14155550123")
        self.assertEqual(format_phone(""), "")

    def test_render_message(self):
        text = render_message("Asha", DETAILS)

        self.assertIn("Hello Asha!", text)
        self.assertIn("WK/1001, WK/1002", text)
        self.assertIn("Transaction ID: TXN1-AAAAAAAA", text)
        self.assertIn("₹50", text)
        self.assertIn("₹100", text)

    def test_render_message_without_name(self):
        self.assertIn("Hello Customer!", render_message(None, DETAILS))


class WhatsAppNotifierTestCase(AppTestCase):
    def setUp(self):
        super().setUp()
        with self.Session() as session:
            self.user = make_user(session, name="Asha", phone="9876543210")
            self.no_phone = make_user(session, email="nophone@example.com", phone=None)
            session.commit()

    def _notifier(self, http, token="token"):
        return WhatsAppNotifier(access_token=token, phone_number_id="12345", api_base="https://example.test/v18.0/", http=http)

    def test_sends_text_message(self):
        http = FakeHttp()
        with self.Session() as session:
            message_id = self._notifier(http).send_ticket_confirmation(session, self.user.id, DETAILS)

        self.assertEqual(message_id, "wamid.1")
        call = http.calls[0]
        self.assertEqual(call["url"], "https://example.test/v18.0/12345/messages")
        self.assertEqual(call["headers"], {"Authorization": "Bearer token"})
        self.assertEqual(call["json"]["to"], "919876543210")
        self.assertEqual(call["json"]["type"], "text")
        self.assertIn("WK/1001", call["json"]["text"]["body"])

    def test_unconfigured(self):
        notifier = self._notifier(FakeHttp(), token="")
        self.assertFalse(notifier.configured)
        with self.Session() as session:
            with self.assertRaises(NotificationError):
                notifier.send_ticket_confirmation(session, self.user.id, DETAILS)

    def test_user_lookup(self):
        notifier = self._notifier(FakeHttp())
        with self.Session() as session:
            with self.assertRaises(NotFoundError):
                notifier.send_ticket_confirmation(session, "missing", DETAILS)
            with self.assertRaises(ValidationError):
                notifier.send_ticket_confirmation(session, self.no_phone.id, DETAILS)

    def test_api_error(self):
        http = FakeHttp(FakeResponse(400, {"error": {"message": "bad recipient"}}))
        with self.Session() as session:
            with self.assertRaises(NotificationError) as ctx:
                self._notifier(http).send_ticket_confirmation(session, self.user.id, DETAILS)
        self.assertEqual(ctx.exception.details, {"error": {"message": "bad recipient"}})

    def test_transport_error(self):
        http = FakeHttp(error=requests.ConnectionError("refused"))
        with self.Session() as session:
            with self.assertRaises(NotificationError):
                self._notifier(http).send_ticket_confirmation(session, self.user.id, DETAILS)

    def test_from_config(self):
        notifier = WhatsAppNotifier.from_config(
            {"WHATSAPP_ACCESS_TOKEN": "t", "WHATSAPP_PHONE_NUMBER_ID": "p", "DEFAULT_COUNTRY_CODE": "44"},
            http=FakeHttp(),
        )
        self.assertTrue(notifier.configured)
        self.assertEqual(notifier.default_country_code, "44")

    def test_notify_settlement_sends_one_message_per_draw_date(self):
        http = FakeHttp()
        receipt = SettlementReceipt(
            user_id=self.user.id,
            order_ids=["o1", "o2"],
            purchases=[
                PurchaseSummary("l1", "Weekly Draw", Decimal("50.00"), date(2026, 1, 15), ["WK/1001"], ["TXN1"]),
                PurchaseSummary("l1", "Weekly Draw", Decimal("50.00"), date(2026, 1, 16), ["WK/1001"], ["TXN2"]),
            ],
        )
        with self.Session() as session:
            sent = notify_settlement(session, self._notifier(http), receipt)

        self.assertEqual(sent, 2)
        self.assertIn("Draw Date: 2026-01-16", http.calls[1]["json"]["text"]["body"])

    def test_notify_settlement_swallows_failures(self):
        receipt = SettlementReceipt(
            user_id=self.no_phone.id,
            order_ids=["o1"],
            purchases=[PurchaseSummary("l1", "Weekly Draw", Decimal("50.00"), date(2026, 1, 15), ["WK/1001"], ["TXN1"])],
        )
        http = FakeHttp()
        with self.Session() as session:
            self.assertEqual(notify_settlement(session, self._notifier(http), receipt), 0)
            self.assertEqual(notify_settlement(session, self._notifier(http, token=""), receipt), 0)
        self.assertEqual(http.calls, [])
