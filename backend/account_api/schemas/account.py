"""Account Marshmallow schemas.

Transport-level checks only (types, presence, email shape, column sizes); the field
rules live in :mod:`account_api.services.accounts.rules`.
"""

from __future__ import annotations

from marshmallow import fields, validate

from .common import BaseSchema


class AccountSchema(BaseSchema):
    """Serialize accounts for API responses; the password hash never leaves."""

    id = fields.String(dump_only=True)
    email = fields.String(dump_only=True)
    name = fields.String(dump_only=True)
    is_active = fields.Boolean(dump_only=True)
    fixed_number = fields.String(dump_only=True, allow_none=True)
    mobile_number = fields.String(dump_only=True, allow_none=True)
    postal_code = fields.String(dump_only=True)
    prefecture_code = fields.Integer(dump_only=True)
    prefecture_name = fields.String(dump_only=True)
    address_details = fields.String(dump_only=True)
    logged_in_at = fields.DateTime(dump_only=True, allow_none=True)
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)


class AccountCreateSchema(BaseSchema):
    """Validate registration payloads."""

    email = fields.Email(required=True, validate=validate.Length(max=256))
    name = fields.String(required=True, validate=validate.Length(max=20))
    password = fields.String(required=True, load_only=True, validate=validate.Length(max=128))
    fixed_number = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=20))
    mobile_number = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=20))
    postal_code = fields.String(required=True, validate=validate.Length(max=8))
    prefecture_code = fields.Integer(required=True, strict=True)
    address_details = fields.String(required=True, validate=validate.Length(max=100))


class AccountUpdateSchema(BaseSchema):
    """Schema for partial account updates; an empty string clears a phone."""

    email = fields.Email(load_only=True, validate=validate.Length(max=256))
    name = fields.String(load_only=True, validate=validate.Length(max=20))
    is_active = fields.Boolean(load_only=True)
    fixed_number = fields.String(load_only=True, validate=validate.Length(max=20))
    mobile_number = fields.String(load_only=True, validate=validate.Length(max=20))
    postal_code = fields.String(load_only=True, validate=validate.Length(max=8))
    prefecture_code = fields.Integer(load_only=True, strict=True)
    address_details = fields.String(load_only=True, validate=validate.Length(max=100))


class PasswordChangeSchema(BaseSchema):
    """Validate password change payloads."""

    old_password = fields.String(required=True, load_only=True, validate=validate.Length(max=128))
    new_password = fields.String(required=True, load_only=True, validate=validate.Length(max=128))


class AccountDeleteQuerySchema(BaseSchema):
    """Query string of ``DELETE /accounts/<id>``."""

    cascade = fields.Boolean(load_default=False)
