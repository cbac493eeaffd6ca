"""Schemas for registration, login and profile payloads."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate, validates_schema

PHONE_PATTERN = r"^[0-9]{10}$"


class RegisterSchema(Schema):
    name = fields.String(
        required=True,
        validate=validate.Length(min=2, max=100, error="Name must be between 2 and 100 characters"),
    )
    phone = fields.String(required=True, validate=validate.Regexp(PHONE_PATTERN, error="Phone must be 10 digits"))
    email = fields.Email(required=True, error_messages={"invalid": "Invalid email address"})
    password = fields.String(
        required=True,
        load_only=True,
        validate=validate.Length(min=8, error="Password must be at least 8 characters"),
    )
    confirm_password = fields.String(required=True, load_only=True)
    terms_accepted = fields.Boolean(
        required=True,
        validate=validate.Equal(True, error="You must accept terms"),
    )

    @validates_schema
    def _validate_passwords_match(self, data, **kwargs):  # type: ignore[no-untyped-def]
        if "password" in data and data.get("confirm_password") != data.get("password"):
            raise ValidationError({"confirm_password": ["Passwords do not match"]})


class LoginSchema(Schema):
    email = fields.Email(required=True, error_messages={"invalid": "Invalid email address"})
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1, error="Password is required"))


class ProfileUpdateSchema(Schema):
    name = fields.String(required=False, validate=validate.Length(min=2, max=100))
    email = fields.Email(required=False)
    # Empty string clears the phone number.
    phone = fields.String(required=False, validate=validate.Regexp(r"^([0-9]{10})?$", error="Phone must be 10 digits"))


class UserSchema(Schema):
    id = fields.String(required=True)
    name = fields.String(required=True)
    email = fields.String(required=True)
    phone = fields.String(allow_none=True)
    is_admin = fields.Boolean()
    created_at = fields.DateTime()
