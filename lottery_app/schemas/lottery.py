"""Marshmallow schemas for lotteries."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate, validates_schema

from lottery_app.models.lottery import LotteryStatus, LotteryType

_POSITIVE = validate.Range(min=0, min_inclusive=False, error="Must be greater than 0")


class PrizeTierSchema(Schema):
    rank = fields.Integer()
    amount = fields.Decimal(as_string=True)


class LotterySchema(Schema):
    """Serialize Lottery."""

    id = fields.String(required=True)
    name = fields.String(required=True)
    lottery_type = fields.String()
    draw_date = fields.DateTime()
    ticket_price = fields.Decimal(as_string=True)
    total_tickets = fields.Integer()
    series_code = fields.String()
    number_base = fields.Integer()
    status = fields.String()
    image_url = fields.String(allow_none=True)
    prize_tiers = fields.List(fields.Nested(PrizeTierSchema))


class LotteryCreateSchema(Schema):
    """Validate admin lottery creation payload."""

    name = fields.String(required=True, validate=validate.Length(min=3, max=100))
    lottery_type = fields.String(
        required=False,
        load_default=LotteryType.WEEKLY.value,
        validate=validate.OneOf([t.value for t in LotteryType]),
    )
    draw_date = fields.DateTime(required=True)
    ticket_price = fields.Decimal(required=True, places=2, validate=_POSITIVE)
    first_prize = fields.Decimal(required=True, places=2, validate=_POSITIVE)
    second_prize = fields.Decimal(required=False, load_default=None, allow_none=True, places=2, validate=_POSITIVE)
    third_prize = fields.Decimal(required=False, load_default=None, allow_none=True, places=2, validate=_POSITIVE)
    status = fields.String(
        required=False,
        load_default=LotteryStatus.UPCOMING.value,
        validate=validate.OneOf([LotteryStatus.UPCOMING.value, LotteryStatus.ACTIVE.value]),
    )
    total_tickets = fields.Integer(required=False, load_default=1000, validate=validate.Range(min=1, max=1_000_000))
    series_code = fields.String(
        required=True,
        validate=validate.Regexp(r"^[0-9A-Za-z-]{1,20}$", error="Letters, digits and '-' only"),
    )
    number_base = fields.Integer(required=False, load_default=1000, validate=validate.Range(min=0))
    image_url = fields.Url(required=False, load_default=None, allow_none=True)

    @validates_schema
    def _validate_tiers(self, data, **kwargs):  # type: ignore[no-untyped-def]
        if data.get("third_prize") is not None and data.get("second_prize") is None:
            raise ValidationError({"second_prize": ["Required when third_prize is set"]})


class LotteryStatusSchema(Schema):
    status = fields.String(required=True, validate=validate.OneOf([s.value for s in LotteryStatus]))


class TicketPoolQuerySchema(Schema):
    draw_date = fields.Date(required=True)
