"""Withdrawal intake routes."""

from __future__ import annotations

from flask import Blueprint, request

from lottery_app.auth import current_user, login_required
from lottery_app.db import get_session
from lottery_app.schemas.withdrawal import WithdrawalCreateSchema, WithdrawalSchema
from lottery_app.services.withdrawal_service import WithdrawalService
from lottery_app.utils.responses import created, ok

withdrawals_bp = Blueprint("withdrawals", __name__)

_create_schema = WithdrawalCreateSchema()
_schema = WithdrawalSchema()
_list_schema = WithdrawalSchema(many=True)
_service = WithdrawalService()


@withdrawals_bp.post("/withdrawals")
@login_required
def submit_withdrawal():
    payload = request.get_json(silent=True) or {}
    data = _create_schema.load(payload)

    withdrawal = _service.submit(get_session(), current_user(), data)
    return created(_schema.dump(withdrawal))


@withdrawals_bp.get("/withdrawals")
@login_required
def list_my_withdrawals():
    return ok(_list_schema.dump(_service.list_for_user(get_session(), current_user())))
