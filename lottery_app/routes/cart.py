"""Cart routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from lottery_app.auth import current_user, login_required
from lottery_app.db import get_session
from lottery_app.schemas.cart import CartAddSchema, CartItemSchema
from lottery_app.services.cart_service import CartService
from lottery_app.utils.responses import created, ok

cart_bp = Blueprint("cart", __name__)

_add_schema = CartAddSchema()
_line_schema = CartItemSchema()
_lines_schema = CartItemSchema(many=True)
_service = CartService()


@cart_bp.get("/cart")
@login_required
def list_cart():
    view = _service.list_cart(get_session(), current_user())
    return ok(
        {
            "items": _lines_schema.dump(view.lines),
            "total_tickets": view.total_tickets,
            "total_amount": str(view.total_amount),
        }
    )


@cart_bp.post("/cart")
@login_required
def add_to_cart():
    payload = request.get_json(silent=True) or {}
    data = _add_schema.load(payload)

    session = get_session()
    item = _service.add_to_cart(
        session,
        current_user(),
        lottery_id=str(data["lottery_id"]),
        ticket_numbers=data["ticket_numbers"],
        draw_dates=data["draw_dates"],
        bunch_size=data.get("bunch_size"),
    )
    line = next(line for line in _service.list_cart(session, current_user()).lines if line.id == item.id)
    return created(_line_schema.dump(line))


@cart_bp.delete("/cart/<item_id>")
@login_required
def remove_from_cart(item_id: str):
    _service.remove_from_cart(get_session(), current_user(), item_id)
    return ok({"id": item_id, "deleted": True})
