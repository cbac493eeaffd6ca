"""Manual ticket confirmation dispatch."""

from __future__ import annotations

from flask import Blueprint, request

from lottery_app.auth import current_user, login_required
from lottery_app.db import get_session
from lottery_app.errors import ForbiddenError
from lottery_app.schemas.notification import TicketConfirmationRequestSchema
from lottery_app.services.notification_service import TicketDetails, current_notifier
from lottery_app.utils.responses import ok

notifications_bp = Blueprint("notifications", __name__)

_request_schema = TicketConfirmationRequestSchema()


@notifications_bp.post("/notifications/ticket-confirmation")
@login_required
def send_ticket_confirmation():
    payload = request.get_json(silent=True) or {}
    data = _request_schema.load(payload)

    user = current_user()
    if data["user_id"] != user.id and not user.is_admin:
        raise ForbiddenError("Cannot notify another user")

    message_id = current_notifier().send_ticket_confirmation(
        get_session(),
        data["user_id"],
        TicketDetails(**data["ticket_details"]),
    )
    return ok({"message_id": message_id})
