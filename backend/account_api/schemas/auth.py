"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import fields, validate

from .common import BaseSchema


class LoginSchema(BaseSchema):
    """Input payload for authenticating an account.

    Only presence and size are checked here; a malformed email simply fails
    authentication like an unknown one.
    """

    email = fields.String(required=True, validate=validate.Length(min=1, max=256))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(BaseSchema):
    """Input payload for rotating a refresh token."""

    refresh_token = fields.String(required=True, validate=validate.Length(min=1, max=8192))


class LogoutSchema(BaseSchema):
    """Input payload for logout; the token may be the access or the refresh one."""

    token = fields.String(required=True, validate=validate.Length(min=1, max=8192))
    all_sessions = fields.Boolean(load_default=False)


class TokenPairSchema(BaseSchema):
    """Response payload containing an access/refresh pair."""

    access_token = fields.String(attribute="access", dump_only=True)
    access_expired_at = fields.DateTime(dump_only=True)
    refresh_token = fields.String(attribute="refresh", dump_only=True)
    refresh_expired_at = fields.DateTime(dump_only=True)
    token_type = fields.Constant("bearer", dump_only=True)
