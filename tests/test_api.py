from support import AppTestCase, make_lottery, make_user

from lottery_app.models import Order


class ApiTestCase(AppTestCase):
    push_context = False

    def setUp(self):
        super().setUp()
        self.client = self.app.test_client()
        with self.Session() as session:
            self.admin = make_user(session, email="admin@example.com", is_admin=True)
            self.user = make_user(session)
            self.lottery = make_lottery(session)
            session.commit()

    def _json(self, resp):
        return resp.get_json()


class HealthAndAuthTestCase(ApiTestCase):
    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self._json(resp), {"success": True, "data": {"status": "ok", "database": "sqlite"}, "error": None})

    def test_unknown_route_and_method(self):
        resp = self.client.get("/nope")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(self._json(resp)["error"]["code"], "not_found")

        resp = self.client.delete("/health")
        self.assertEqual(resp.status_code, 405)
        self.assertEqual(self._json(resp)["error"]["code"], "method_not_allowed")

    def test_register_login_and_profile(self):
        resp = self.client.post(
            "/auth/register",
            json={
                "name": "Asha Rao",
                "phone": "9123456780",
                "email": "Asha@Example.com",
                "password": "correct-horse",
                "confirm_password": "correct-horse",
                "terms_accepted": True,
            },
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self._json(resp)["data"]["user"]["email"], "asha@example.com")

        resp = self.client.post("/auth/login", json={"email": "asha@example.com", "password": "correct-horse"})
        self.assertEqual(resp.status_code, 200)
        token = self._json(resp)["data"]["token"]

        resp = self.client.patch("/me", json={"phone": ""}, headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(self._json(resp)["data"]["phone"])

    def test_register_validation_errors(self):
        resp = self.client.post(
            "/auth/register",
            json={
                "name": "A",
                "phone": "123",
                "email": "a@example.com",
                "password": "short",
                "confirm_password": "other",
                "terms_accepted": False,
            },
        )
        self.assertEqual(resp.status_code, 400)
        error = self._json(resp)["error"]
        self.assertEqual(error["code"], "validation_error")
        for field in ("name", "phone", "password", "terms_accepted"):
            self.assertIn(field, error["details"])

    def test_duplicate_email(self):
        resp = self.client.post(
            "/auth/register",
            json={
                "name": "Someone",
                "phone": "9123456780",
                "email": "user@example.com",
                "password": "password123",
                "confirm_password": "password123",
                "terms_accepted": True,
            },
        )
        self.assertEqual(resp.status_code, 409)

    def test_bad_login(self):
        resp = self.client.post("/auth/login", json={"email": "user@example.com", "password": "wrong"})
        self.assertEqual(resp.status_code, 401)

    def test_protected_routes_need_a_token(self):
        for method, path in (("get", "/cart"), ("get", "/me"), ("get", "/results/winnings"), ("post", "/withdrawals")):
            resp = getattr(self.client, method)(path)
            self.assertEqual(resp.status_code, 401, path)
            self.assertEqual(self._json(resp)["error"]["code"], "unauthorized")

        resp = self.client.get("/cart", headers={"Authorization": "Bearer not-a-token"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(self._json(resp)["error"]["message"], "Invalid token")

    def test_admin_routes_need_admin(self):
        resp = self.client.get("/admin/stats", headers=self.auth_headers(self.user))
        self.assertEqual(resp.status_code, 403)

        resp = self.client.get("/admin/stats", headers=self.auth_headers(self.admin))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self._json(resp)["data"]["total_users"], 2)


class ProcessPaymentEndpointTestCase(ApiTestCase):
    def test_preflight(self):
        resp = self.client.options("/process-payment")
        self.assertEqual(resp.status_code, 204)
        self.assertEqual(resp.headers["Access-Control-Allow-Origin"], "*")
        self.assertIn("authorization", resp.headers["Access-Control-Allow-Headers"])

    def test_missing_token_is_401_with_cors(self):
        resp = self.client.post("/process-payment")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.headers["Access-Control-Allow-Origin"], "*")

        body = self._json(resp)
        self.assertFalse(body["success"])
        self.assertIsInstance(body["error"], str)
        self.assertEqual(body["code"], "unauthorized")

    def test_empty_cart(self):
        resp = self.client.post("/process-payment", headers=self.auth_headers(self.user))
        self.assertEqual(resp.status_code, 400)
        body = self._json(resp)
        self.assertIsInstance(body["error"], str)
        self.assertEqual(body["code"], "empty_cart")
        self.assertIn("details", body)

    def test_history_errors_use_the_same_shape(self):
        resp = self.client.get("/orders", headers={"Authorization": "Bearer not-a-token"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(self._json(resp)["error"], "Invalid token")

    def test_request_body_is_ignored(self):
        headers = self.auth_headers(self.user)
        self.client.post(
            "/cart",
            json={"lottery_id": self.lottery.id, "ticket_numbers": ["WK/1001"], "draw_dates": ["2030-01-15"]},
            headers=headers,
        )

        resp = self.client.post(
            "/process-payment",
            json={"user_id": self.admin.id, "ticket_price": "0.01"},
            headers=headers,
        )

        self.assertEqual(resp.status_code, 200)
        body = self._json(resp)
        self.assertTrue(body["success"])
        self.assertEqual(body["orderIds"], body["data"]["order_ids"])
        self.assertEqual(body["data"]["total_amount"], "50.00")
        with self.Session() as session:
            order = session.get(Order, body["orderIds"][0])
            self.assertEqual(order.user_id, self.user.id)


class PurchaseToPayoutFlowTestCase(ApiTestCase):
    def test_full_flow(self):
        admin = self.auth_headers(self.admin)
        user = self.auth_headers(self.user)

        resp = self.client.post(
            "/admin/lotteries",
            json={
                "name": "Friday Special",
                "lottery_type": "special",
                "draw_date": "2030-01-16T18:00:00",
                "ticket_price": "20.00",
                "first_prize": "5000.00",
                "second_prize": "500.00",
                "status": "active",
                "total_tickets": 50,
                "series_code": "FS",
                "number_base": 100,
            },
            headers=admin,
        )
        self.assertEqual(resp.status_code, 201, resp.get_json())
        lottery_id = self._json(resp)["data"]["id"]

        resp = self.client.get(f"/lotteries/{lottery_id}/ticket-numbers?draw_date=2030-01-16")
        self.assertEqual(resp.status_code, 200)
        pool = self._json(resp)["data"]["ticket_numbers"]
        self.assertEqual(len(pool), 50)
        picks = sorted(pool)[:2]

        resp = self.client.post(
            "/cart",
            json={"lottery_id": lottery_id, "ticket_numbers": picks, "draw_dates": ["2030-01-16"]},
            headers=user,
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self._json(resp)["data"]["line_total"], "40.00")

        resp = self.client.get("/cart", headers=user)
        self.assertEqual(self._json(resp)["data"]["total_tickets"], 2)

        resp = self.client.post("/process-payment", headers=user)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(self._json(resp)["orderIds"]), 2)

        resp = self.client.get("/cart", headers=user)
        self.assertEqual(self._json(resp)["data"]["items"], [])

        resp = self.client.get(f"/lotteries/{lottery_id}/ticket-numbers?draw_date=2030-01-16")
        self.assertEqual(len(self._json(resp)["data"]["ticket_numbers"]), 48)

        resp = self.client.post(
            "/cart",
            json={"lottery_id": lottery_id, "ticket_numbers": [picks[0]], "draw_dates": ["2030-01-16"]},
            headers=self.auth_headers(self.admin),
        )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self._json(resp)["error"]["code"], "ticket_already_booked")

        resp = self.client.get("/booked-tickets", headers=user)
        booked = {t["ticket_number"]: t["id"] for t in self._json(resp)["data"]}
        self.assertEqual(sorted(booked), picks)

        resp = self.client.post(
            "/admin/results",
            json={"lottery_id": lottery_id, "winning_numbers": ["FS/149", picks[1]]},
            headers=admin,
        )
        self.assertEqual(resp.status_code, 201, resp.get_json())

        resp = self.client.get("/results?date=2030-01-16")
        results = self._json(resp)["data"]["results"]
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0]["winning_numbers"], ["FS/149", picks[1]])

        resp = self.client.get("/results/winnings?date=2030-01-16", headers=user)
        winnings = self._json(resp)["data"]
        self.assertTrue(winnings["has_won"])
        self.assertEqual(winnings["winning_numbers"], [picks[1]])
        self.assertEqual(winnings["tickets"][0]["prize_amount"], "500.00")

        resp = self.client.post(
            "/withdrawals",
            json={
                "booked_ticket_id": booked[picks[1]],
                "name": "Test User",
                "email": "user@example.com",
                "bank_name": "HDFC Bank",
                "branch": "Indiranagar",
                "account_number": "50100123456789",
                "ifsc_code": "HDFC0001234",
                "pan_card": "ABCDE1234F",
                "aadhar_card": "123412341234",
            },
            headers=user,
        )
        self.assertEqual(resp.status_code, 201, resp.get_json())
        withdrawal_id = self._json(resp)["data"]["id"]

        resp = self.client.get("/admin/withdrawals?status=pending", headers=admin)
        self.assertEqual([w["id"] for w in self._json(resp)["data"]], [withdrawal_id])

        resp = self.client.patch(f"/admin/withdrawals/{withdrawal_id}", json={"status": "approved"}, headers=admin)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self._json(resp)["data"]["status"], "approved")

        resp = self.client.get("/withdrawals", headers=user)
        self.assertEqual(self._json(resp)["data"][0]["status"], "approved")

        resp = self.client.get("/admin/stats", headers=admin)
        stats = self._json(resp)["data"]
        self.assertEqual(stats["total_tickets"], 2)
        self.assertEqual(stats["pending_withdrawals"], 0)

    def test_failed_cart_add_writes_nothing(self):
        resp = self.client.post(
            "/cart",
            json={"lottery_id": self.lottery.id, "ticket_numbers": ["WK/1", "WK/1001"], "draw_dates": ["2030-01-15"]},
            headers=self.auth_headers(self.user),
        )
        self.assertEqual(resp.status_code, 400)

        resp = self.client.get("/cart", headers=self.auth_headers(self.user))
        self.assertEqual(self._json(resp)["data"]["items"], [])

    def test_past_draw_date_is_a_field_error(self):
        resp = self.client.post(
            "/cart",
            json={"lottery_id": self.lottery.id, "ticket_numbers": ["WK/1001"], "draw_dates": ["2020-01-15"]},
            headers=self.auth_headers(self.user),
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("draw_dates", self._json(resp)["error"]["details"])


class NotificationEndpointTestCase(ApiTestCase):
    def test_cannot_notify_someone_else(self):
        resp = self.client.post(
            "/notifications/ticket-confirmation",
            json={
                "user_id": self.admin.id,
                "ticket_details": {
                    "lottery_name": "Weekly Draw",
                    "ticket_numbers": ["WK/1001"],
                    "draw_date": "2030-01-15",
                    "transaction_id": "TXN1",
                    "ticket_price": "50",
                    "total_amount": "50",
                },
            },
            headers=self.auth_headers(self.user),
        )
        self.assertEqual(resp.status_code, 403)

    def test_unconfigured_notifier_reports_failure(self):
        resp = self.client.post(
            "/notifications/ticket-confirmation",
            json={
                "user_id": self.user.id,
                "ticket_details": {
                    "lottery_name": "Weekly Draw",
                    "ticket_numbers": ["WK/1001"],
                    "draw_date": "2030-01-15",
                    "transaction_id": "TXN1",
                    "ticket_price": "50",
                    "total_amount": "50",
                },
            },
            headers=self.auth_headers(self.user),
        )
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(self._json(resp)["error"]["code"], "notification_failed")
