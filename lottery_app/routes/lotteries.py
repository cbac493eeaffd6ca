"""Public lottery catalogue routes."""

from __future__ import annotations

from flask import Blueprint, request

from lottery_app.db import get_session
from lottery_app.schemas.lottery import LotterySchema, TicketPoolQuerySchema
from lottery_app.services.lottery_service import LotteryService
from lottery_app.services.ticket_service import TicketService
from lottery_app.utils.responses import ok

lotteries_bp = Blueprint("lotteries", __name__)

_lottery_schema = LotterySchema()
_lotteries_schema = LotterySchema(many=True)
_pool_query_schema = TicketPoolQuerySchema()
_service = LotteryService()
_tickets = TicketService()


@lotteries_bp.get("/lotteries")
def list_lotteries():
    """List lotteries, optionally filtered by ?status=."""

    status = (request.args.get("status") or "").strip() or None
    lotteries = _service.list_lotteries(get_session(), status=status)
    return ok(_lotteries_schema.dump(lotteries))


@lotteries_bp.get("/lotteries/<lottery_id>")
def get_lottery(lottery_id: str):
    return ok(_lottery_schema.dump(_service.get_lottery(get_session(), lottery_id)))


@lotteries_bp.get("/lotteries/<lottery_id>/ticket-numbers")
def ticket_numbers(lottery_id: str):
    """Candidate unbooked ticket numbers for ?draw_date=YYYY-MM-DD."""

    query = _pool_query_schema.load(request.args.to_dict())
    numbers = _tickets.available_numbers(get_session(), lottery_id, query["draw_date"])
    return ok(
        {
            "lottery_id": lottery_id,
            "draw_date": query["draw_date"].isoformat(),
            "ticket_numbers": numbers,
        }
    )
