"""Schemas for declared results and winnings."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate, validates_schema


class ResultWinnerSchema(Schema):
    rank = fields.Integer()
    ticket_number = fields.String()
    prize_amount = fields.Decimal(as_string=True)


class LotteryResultSchema(Schema):
    id = fields.String()
    lottery_id = fields.String()
    lottery_name = fields.String()
    draw_date = fields.DateTime()
    declared_at = fields.DateTime()
    winning_numbers = fields.List(fields.String())
    winners = fields.List(fields.Nested(ResultWinnerSchema))


class DeclareResultSchema(Schema):
    lottery_id = fields.String(required=True)
    # Rank order: first prize, then optional second and third.
    winning_numbers = fields.List(
        fields.String(validate=validate.Length(min=1, max=50)),
        required=True,
        validate=validate.Length(min=1, max=3, error="Provide 1 to 3 winning numbers"),
    )

    @validates_schema
    def _validate_unique(self, data, **kwargs):  # type: ignore[no-untyped-def]
        numbers = data.get("winning_numbers") or []
        if len(numbers) != len(set(numbers)):
            raise ValidationError({"winning_numbers": ["Winning numbers must be unique"]})


class WinningTicketSchema(Schema):
    booked_ticket_id = fields.String()
    lottery_id = fields.String()
    lottery_name = fields.String()
    ticket_number = fields.String()
    draw_date = fields.Date()
    rank = fields.Integer()
    prize_amount = fields.Decimal(as_string=True)
