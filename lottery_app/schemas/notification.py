"""Schemas for the ticket confirmation message payload."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class TicketDetailsSchema(Schema):
    lottery_name = fields.String(required=True)
    ticket_numbers = fields.List(fields.String(), required=True, validate=validate.Length(min=1))
    draw_date = fields.String(required=True)
    transaction_id = fields.String(required=True)
    ticket_price = fields.Decimal(required=True)
    total_amount = fields.Decimal(required=True)


class TicketConfirmationRequestSchema(Schema):
    user_id = fields.String(required=True)
    ticket_details = fields.Nested(TicketDetailsSchema, required=True)
