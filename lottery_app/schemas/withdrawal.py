"""Schemas for withdrawal intake and admin decisions."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

ACCOUNT_NUMBER_PATTERN = r"^[0-9]{9,18}$"
IFSC_PATTERN = r"^[A-Z]{4}0[A-Z0-9]{6}$"
PAN_PATTERN = r"^[A-Z]{5}[0-9]{4}[A-Z]{1}$"
AADHAR_PATTERN = r"^[0-9]{12}$"


class WithdrawalCreateSchema(Schema):
    booked_ticket_id = fields.String(required=True)
    name = fields.String(required=True, validate=validate.Length(min=2, max=100, error="Name is required"))
    email = fields.Email(required=True, error_messages={"invalid": "Invalid email"})
    bank_name = fields.String(required=True, validate=validate.Length(min=2, error="Bank name is required"))
    branch = fields.String(required=True, validate=validate.Length(min=2, error="Branch is required"))
    account_number = fields.String(
        required=True,
        validate=validate.Regexp(ACCOUNT_NUMBER_PATTERN, error="Invalid account number (9-18 digits)"),
    )
    ifsc_code = fields.String(
        required=True,
        validate=validate.Regexp(IFSC_PATTERN, error="Invalid IFSC code format"),
    )
    pan_card = fields.String(
        required=True,
        validate=validate.Regexp(PAN_PATTERN, error="Invalid PAN format (e.g., ABCDE1234F)"),
    )
    aadhar_card = fields.String(
        required=True,
        validate=validate.Regexp(AADHAR_PATTERN, error="Aadhar must be 12 digits"),
    )


class WithdrawalSchema(Schema):
    id = fields.String()
    user_id = fields.String()
    booked_ticket_id = fields.String()
    result_id = fields.String()
    amount = fields.Decimal(as_string=True)
    name = fields.String()
    email = fields.String()
    bank_name = fields.String()
    branch = fields.String()
    account_number = fields.String()
    ifsc_code = fields.String()
    pan_card = fields.String()
    aadhar_card = fields.String()
    status = fields.String()
    created_at = fields.DateTime()
    processed_at = fields.DateTime(allow_none=True)
    processed_by = fields.String(allow_none=True)


class WithdrawalDecisionSchema(Schema):
    status = fields.String(required=True, validate=validate.OneOf(["approved", "rejected"]))
