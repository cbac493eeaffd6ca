"""Schemas for orders and booked tickets."""

from __future__ import annotations

from marshmallow import Schema, fields


class OrderSchema(Schema):
    id = fields.String()
    lottery_id = fields.String()
    lottery_name = fields.String()
    ticket_price = fields.Decimal(as_string=True)
    draw_time = fields.Date()
    transaction_id = fields.String()
    status = fields.String()
    created_at = fields.DateTime()


class BookedTicketSchema(Schema):
    id = fields.String()
    order_id = fields.String()
    lottery_id = fields.String()
    ticket_number = fields.String()
    draw_date = fields.Date()
    created_at = fields.DateTime()
