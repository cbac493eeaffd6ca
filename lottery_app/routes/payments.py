"""Settlement entry point and purchase history."""

from __future__ import annotations

from flask import Blueprint, Response, current_app

from lottery_app.auth import current_user, login_required
from lottery_app.db import get_session
from lottery_app.error_handlers import register_flat_error_handlers
from lottery_app.schemas.order import BookedTicketSchema, OrderSchema
from lottery_app.services.notification_service import current_notifier, notify_settlement
from lottery_app.services.order_service import OrderService
from lottery_app.services.settlement_service import SettlementService
from lottery_app.utils.responses import ok

payments_bp = Blueprint("payments", __name__)
register_flat_error_handlers(payments_bp)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

_orders_schema = OrderSchema(many=True)
_tickets_schema = BookedTicketSchema(many=True)
_settlement = SettlementService()
_history = OrderService()


@payments_bp.after_request
def _add_cors_headers(response: Response) -> Response:
    for key, value in CORS_HEADERS.items():
        response.headers.setdefault(key, value)
    return response


@payments_bp.route("/process-payment", methods=["OPTIONS"])
def process_payment_preflight():
    return Response(status=204)


@payments_bp.post("/process-payment", provide_automatic_options=False)
@login_required
def process_payment():
    """Settle the caller's cart. The request body is ignored."""

    session = get_session()
    receipt = _settlement.process_payment(session, current_user())

    if current_app.config.get("NOTIFY_ON_SETTLEMENT", True):
        notify_settlement(session, current_notifier(), receipt)

    return ok(
        {"order_ids": receipt.order_ids, "total_amount": str(receipt.total_amount)},
        orderIds=receipt.order_ids,
        message="Payment processed successfully",
    )


@payments_bp.get("/orders")
@login_required
def list_orders():
    return ok(_orders_schema.dump(_history.orders_for(get_session(), current_user())))


@payments_bp.get("/booked-tickets")
@login_required
def list_booked_tickets():
    return ok(_tickets_schema.dump(_history.booked_tickets_for(get_session(), current_user())))
