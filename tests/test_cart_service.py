from datetime import date, datetime, timedelta
from decimal import Decimal

from support import DRAW_DAY, NEXT_DAY, AppTestCase, book_ticket, make_lottery, make_user

from lottery_app.errors import InvalidStateError, NotFoundError, TicketAlreadyBookedError, ValidationError
from lottery_app.models import CartItem, User
from lottery_app.models.base import utcnow
from lottery_app.services.cart_service import CartService


class CartServiceTestCase(AppTestCase):
    def setUp(self):
        super().setUp()
        self.service = CartService()
        with self.Session() as session:
            self.user = make_user(session)
            self.other = make_user(session, email="other@example.com")
            self.lottery = make_lottery(session, draw_date=datetime(2030, 1, 16, 18, 0))
            self.closed = make_lottery(session, name="Closed", status="cancelled")
            session.commit()

    def _user(self, session, user=None):
        return session.get(User, (user or self.user).id)

    def test_add_and_list_cart(self):
        with self.Session() as session:
            user = self._user(session)
            item = self.service.add_to_cart(
                session, user, self.lottery.id, ["WK/1001", "WK/1002"], [DRAW_DAY, NEXT_DAY]
            )
            session.commit()

            self.assertEqual(item.draw_dates, ["2030-01-15", "2030-01-16"])
            self.assertEqual(item.line_count, 4)

            view = self.service.list_cart(session, user)

        self.assertEqual(len(view.lines), 1)
        self.assertEqual(view.total_tickets, 4)
        self.assertEqual(view.total_amount, Decimal("200.00"))
        self.assertEqual(view.lines[0].lottery_name, "Weekly Draw")

    def test_bunch_limit_from_config(self):
        self.app.config["MAX_BUNCH_SIZE"] = 2
        with self.Session() as session:
            with self.assertRaises(ValidationError) as ctx:
                self.service.add_to_cart(
                    session, self._user(session), self.lottery.id, ["WK/1001", "WK/1002", "WK/1003"], [DRAW_DAY]
                )
        self.assertIn("ticket_numbers", ctx.exception.details)

    def test_requested_bunch_size_narrows_the_limit(self):
        with self.Session() as session:
            with self.assertRaises(ValidationError):
                self.service.add_to_cart(
                    session, self._user(session), self.lottery.id, ["WK/1001", "WK/1002"], [DRAW_DAY], bunch_size=1
                )

    def test_too_many_draw_dates(self):
        self.app.config["MAX_DRAW_DATES"] = 1
        with self.Session() as session:
            with self.assertRaises(ValidationError) as ctx:
                self.service.add_to_cart(session, self._user(session), self.lottery.id, ["WK/1001"], [DRAW_DAY, NEXT_DAY])
        self.assertIn("draw_dates", ctx.exception.details)

    def test_draw_dates_outside_the_sale_window_are_rejected(self):
        yesterday = utcnow().date() - timedelta(days=1)
        with self.Session() as session:
            for bad in (yesterday, date(2030, 1, 17)):
                with self.assertRaises(ValidationError, msg=bad.isoformat()) as ctx:
                    self.service.add_to_cart(session, self._user(session), self.lottery.id, ["WK/1001"], [DRAW_DAY, bad])
                self.assertIn("draw_dates", ctx.exception.details)
                self.assertIn(bad.isoformat(), ctx.exception.details["draw_dates"][0])

    def test_draw_day_itself_is_the_last_valid_date(self):
        with self.Session() as session:
            item = self.service.add_to_cart(session, self._user(session), self.lottery.id, ["WK/1001"], [NEXT_DAY])
        self.assertEqual(item.draw_dates, ["2030-01-16"])

    def test_numbers_outside_the_series_are_rejected(self):
        with self.Session() as session:
            for bad in ("XX/1001", "WK/999", "WK/2000", "WK-1001"):
                with self.assertRaises(ValidationError, msg=bad):
                    self.service.add_to_cart(session, self._user(session), self.lottery.id, [bad], [DRAW_DAY])

    def test_duplicate_numbers_are_rejected(self):
        with self.Session() as session:
            with self.assertRaises(ValidationError):
                self.service.add_to_cart(session, self._user(session), self.lottery.id, ["WK/1001", "WK/1001"], [DRAW_DAY])

    def test_lottery_must_be_on_sale(self):
        with self.Session() as session:
            with self.assertRaises(InvalidStateError):
                self.service.add_to_cart(session, self._user(session), self.closed.id, ["WK/1001"], [DRAW_DAY])
            with self.assertRaises(NotFoundError):
                self.service.add_to_cart(session, self._user(session), "missing", ["WK/1001"], [DRAW_DAY])

    def test_already_booked_pair_is_reported(self):
        with self.Session() as session:
            book_ticket(session, self._user(session, self.other), self.lottery, "WK/1001", DRAW_DAY)
            session.commit()

        with self.Session() as session:
            with self.assertRaises(TicketAlreadyBookedError) as ctx:
                self.service.add_to_cart(
                    session, self._user(session), self.lottery.id, ["WK/1001", "WK/1002"], [DRAW_DAY, NEXT_DAY]
                )
        self.assertEqual(ctx.exception.details, [{"ticket_number": "WK/1001", "draw_date": "2030-01-15"}])

    def test_booked_number_on_another_day_is_allowed(self):
        with self.Session() as session:
            book_ticket(session, self._user(session, self.other), self.lottery, "WK/1001", DRAW_DAY)
            session.commit()

        with self.Session() as session:
            item = self.service.add_to_cart(session, self._user(session), self.lottery.id, ["WK/1001"], [NEXT_DAY])
        self.assertEqual(item.line_count, 1)

    def test_remove_only_own_items(self):
        with self.Session() as session:
            item = self.service.add_to_cart(session, self._user(session), self.lottery.id, ["WK/1001"], [DRAW_DAY])
            session.commit()
            item_id = item.id

        with self.Session() as session:
            with self.assertRaises(NotFoundError):
                self.service.remove_from_cart(session, self._user(session, self.other), item_id)

            self.service.remove_from_cart(session, self._user(session), item_id)
            session.commit()

        with self.Session() as session:
            self.assertIsNone(session.get(CartItem, item_id))
