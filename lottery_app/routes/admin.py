"""Administrator routes: draws, results, withdrawals, stats."""

from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, request

from lottery_app.auth import admin_required, current_user
from lottery_app.db import get_session
from lottery_app.errors import ValidationError
from lottery_app.models.withdrawal import WithdrawalStatus
from lottery_app.schemas.lottery import LotteryCreateSchema, LotterySchema, LotteryStatusSchema
from lottery_app.schemas.result import DeclareResultSchema, LotteryResultSchema
from lottery_app.schemas.withdrawal import WithdrawalDecisionSchema, WithdrawalSchema
from lottery_app.services.lottery_service import AdminStatsService, LotteryService
from lottery_app.services.result_service import ResultService
from lottery_app.services.withdrawal_service import WithdrawalService
from lottery_app.utils.responses import created, ok

admin_bp = Blueprint("admin", __name__)

_lottery_create_schema = LotteryCreateSchema()
_lottery_status_schema = LotteryStatusSchema()
_lottery_schema = LotterySchema()
_declare_schema = DeclareResultSchema()
_result_schema = LotteryResultSchema()
_decision_schema = WithdrawalDecisionSchema()
_withdrawal_schema = WithdrawalSchema()
_withdrawals_schema = WithdrawalSchema(many=True)

_lotteries = LotteryService()
_results = ResultService()
_withdrawals = WithdrawalService()
_stats = AdminStatsService()


@admin_bp.post("/lotteries")
@admin_required
def create_lottery():
    payload = request.get_json(silent=True) or {}
    data = _lottery_create_schema.load(payload)

    lottery = _lotteries.create_lottery(get_session(), current_user(), data)
    return created(_lottery_schema.dump(lottery))


@admin_bp.patch("/lotteries/<lottery_id>/status")
@admin_required
def update_lottery_status(lottery_id: str):
    payload = request.get_json(silent=True) or {}
    data = _lottery_status_schema.load(payload)

    lottery = _lotteries.update_status(get_session(), current_user(), lottery_id, str(data["status"]))
    return ok(_lottery_schema.dump(lottery))


@admin_bp.post("/results")
@admin_required
def declare_result():
    payload = request.get_json(silent=True) or {}
    data = _declare_schema.load(payload)

    result = _results.declare_result(
        get_session(),
        current_user(),
        lottery_id=str(data["lottery_id"]),
        winning_numbers=data["winning_numbers"],
    )
    return created(_result_schema.dump(result))


@admin_bp.get("/withdrawals")
@admin_required
def list_withdrawals():
    status = (request.args.get("status") or "").strip() or None
    if status is not None and status not in {s.value for s in WithdrawalStatus}:
        raise ValidationError(details={"status": [f"Unknown status {status}"]})
    return ok(_withdrawals_schema.dump(_withdrawals.list_all(get_session(), status=status)))


@admin_bp.patch("/withdrawals/<withdrawal_id>")
@admin_required
def decide_withdrawal(withdrawal_id: str):
    payload = request.get_json(silent=True) or {}
    data = _decision_schema.load(payload)

    withdrawal = _withdrawals.decide(get_session(), current_user(), withdrawal_id, str(data["status"]))
    return ok(_withdrawal_schema.dump(withdrawal))


@admin_bp.get("/stats")
@admin_required
def stats():
    return ok(asdict(_stats.collect(get_session())))
