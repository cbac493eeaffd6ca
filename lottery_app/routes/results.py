"""Result and winnings routes."""

from __future__ import annotations

from datetime import date

from flask import Blueprint, request

from lottery_app.auth import current_user, login_required
from lottery_app.db import get_session
from lottery_app.models.base import utcnow
from lottery_app.schemas.result import LotteryResultSchema, WinningTicketSchema
from lottery_app.services.result_service import ResultService
from lottery_app.utils.dates import parse_day
from lottery_app.utils.responses import ok

results_bp = Blueprint("results", __name__)

_results_schema = LotteryResultSchema(many=True)
_winning_schema = WinningTicketSchema(many=True)
_service = ResultService()


def _requested_range() -> tuple[date, date]:
    """?date=D, or ?start=S&end=E; defaults to today (UTC)."""

    raw_day = (request.args.get("date") or "").strip()
    raw_start = (request.args.get("start") or "").strip()
    raw_end = (request.args.get("end") or "").strip()

    if raw_start:
        start = parse_day(raw_start, "start")
        end = parse_day(raw_end, "end") if raw_end else start
        return start, end

    day = parse_day(raw_day) if raw_day else utcnow().date()
    return day, day


@results_bp.get("/results")
def list_results():
    start, end = _requested_range()
    results = _service.fetch_results_between(get_session(), start, end)
    return ok(
        {
            "start": start.isoformat(),
            "end": end.isoformat(),
            "results": _results_schema.dump(results),
        }
    )


@results_bp.get("/results/winnings")
@login_required
def my_winnings():
    start, end = _requested_range()
    winnings = _service.winnings_for_user(get_session(), current_user(), start, end)
    return ok(
        {
            "start": start.isoformat(),
            "end": end.isoformat(),
            "has_won": winnings.has_won,
            "winning_numbers": winnings.winning_numbers,
            "tickets": _winning_schema.dump(winnings.tickets),
            "results": _results_schema.dump(winnings.results),
        }
    )
