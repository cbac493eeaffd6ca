"""Schemas for cart payloads."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate, validates_schema


class CartAddSchema(Schema):
    lottery_id = fields.String(required=True)
    ticket_numbers = fields.List(
        fields.String(validate=validate.Length(min=1, max=50)),
        required=True,
        validate=validate.Length(min=1, error="Select at least one ticket"),
    )
    draw_dates = fields.List(
        fields.Date(),
        required=True,
        validate=validate.Length(min=1, error="Select at least one draw date"),
    )
    # UI "bunch" selection; the server also applies MAX_BUNCH_SIZE.
    bunch_size = fields.Integer(required=False, load_default=None, validate=validate.Range(min=1))

    @validates_schema
    def _validate_unique(self, data, **kwargs):  # type: ignore[no-untyped-def]
        numbers = data.get("ticket_numbers") or []
        if len(numbers) != len(set(numbers)):
            raise ValidationError({"ticket_numbers": ["Ticket numbers must be unique"]})
        dates = data.get("draw_dates") or []
        if len(dates) != len(set(dates)):
            raise ValidationError({"draw_dates": ["Draw dates must be unique"]})


class CartItemSchema(Schema):
    id = fields.String()
    lottery_id = fields.String()
    lottery_name = fields.String()
    ticket_price = fields.Decimal(as_string=True)
    ticket_numbers = fields.List(fields.String())
    draw_dates = fields.List(fields.String())
    line_count = fields.Integer()
    line_total = fields.Decimal(as_string=True)
    created_at = fields.DateTime()
