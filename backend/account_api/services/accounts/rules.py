"""Field rules for account input.

The rules are marshmallow schemas run over the service DTOs, so every
failing field is reported at once through :class:`ValidationFailedError`.
The phone rule spans two fields and the current row, so it is checked
after loading.
"""

from __future__ import annotations

import re
from dataclasses import asdict
from typing import Any

from marshmallow import Schema, ValidationError, fields, pre_load, validate

from account_api.services._shared.errors import ValidationFailedError
from account_api.services.accounts.dto import AccountCreateIn, AccountUpdateIn

EMAIL_MAX = 256
NAME_MIN, NAME_MAX = 2, 20
PASSWORD_MIN = 8
ADDRESS_MIN, ADDRESS_MAX = 2, 100
PREFECTURE_MIN, PREFECTURE_MAX = 1, 47

PHONE_MESSAGE = "At least one of fixed_number or mobile_number is required."


def _contains(pattern: str, error: str) -> validate.Regexp:
    return validate.Regexp(rf".*{pattern}", flags=re.DOTALL, error=error)


PASSWORD_RULES = validate.And(
    validate.Length(min=PASSWORD_MIN, error=f"Password must be at least {PASSWORD_MIN} characters."),
    _contains(r"[a-z]", "Password must contain a lowercase letter."),
    _contains(r"[A-Z]", "Password must contain an uppercase letter."),
    _contains(r"[0-9]", "Password must contain a digit."),
    _contains(r"[!-/:-@\[-`{-~]", "Password must contain a symbol."),
)

PHONE_RULE = validate.Regexp(
    r"0\d{1,4}-\d{1,4}-\d{4}\Z", error="Phone number must look like 03-1234-5678."
)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountRules(Schema):
    """Normalize and check account fields; unknown keys are rejected."""

    email = fields.Email(
        required=True,
        validate=validate.Length(max=EMAIL_MAX, error=f"Email must be at most {EMAIL_MAX} characters."),
        error_messages={"invalid": "Email is not a valid address."},
    )
    name = fields.String(
        required=True,
        validate=validate.Length(
            min=NAME_MIN,
            max=NAME_MAX,
            error=f"Name must be between {NAME_MIN} and {NAME_MAX} characters.",
        ),
    )
    password = fields.String(required=True, validate=PASSWORD_RULES)
    is_active = fields.Boolean()
    fixed_number = fields.String(allow_none=True, validate=PHONE_RULE)
    mobile_number = fields.String(allow_none=True, validate=PHONE_RULE)
    postal_code = fields.String(
        required=True,
        validate=validate.Regexp(r"\d{3}-\d{4}\Z", error="Postal code must look like 123-4567."),
    )
    prefecture_code = fields.Integer(
        required=True,
        strict=True,
        validate=validate.Range(
            min=PREFECTURE_MIN,
            max=PREFECTURE_MAX,
            error=f"Prefecture code must be between {PREFECTURE_MIN} and {PREFECTURE_MAX}.",
        ),
    )
    address_details = fields.String(
        required=True,
        validate=validate.Length(
            min=ADDRESS_MIN,
            max=ADDRESS_MAX,
            error=f"Address must be between {ADDRESS_MIN} and {ADDRESS_MAX} characters.",
        ),
    )

    @pre_load
    def _normalize(self, data: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        cleaned = dict(data)
        if isinstance(cleaned.get("email"), str):
            cleaned["email"] = normalize_email(cleaned["email"])
        for key in ("name", "address_details"):
            if isinstance(cleaned.get(key), str):
                cleaned[key] = cleaned[key].strip()
        # A blank phone means "no number".
        for key in ("fixed_number", "mobile_number"):
            if isinstance(cleaned.get(key), str):
                cleaned[key] = cleaned[key].strip() or None
        return cleaned


_create_rules = AccountRules(exclude=("is_active",))
_update_rules = AccountRules(exclude=("password",), partial=True)


def _submitted_phone(data: dict[str, Any], key: str, current: str | None) -> str | None:
    if key not in data:
        return current
    value = data[key]
    return (value.strip() or None) if isinstance(value, str) else value


def _load(
    rules: AccountRules,
    data: dict[str, Any],
    *,
    current_fixed: str | None = None,
    current_mobile: str | None = None,
) -> dict[str, Any]:
    errors: dict[str, list[str]] = {}
    values: dict[str, Any] = {}
    try:
        values = rules.load(data)
    except ValidationError as exc:
        errors.update(exc.normalized_messages())
    fixed = _submitted_phone(data, "fixed_number", current_fixed)
    mobile = _submitted_phone(data, "mobile_number", current_mobile)
    if fixed is None and mobile is None:
        errors["phone"] = [PHONE_MESSAGE]
    if errors:
        raise ValidationFailedError(errors)
    return values


def check_password(password: str) -> list[str]:
    """Return the password-strength problems of ``password`` (empty when strong)."""
    try:
        PASSWORD_RULES(password)
    except ValidationError as exc:
        return list(exc.messages)
    return []


def validate_create(dto: AccountCreateIn) -> dict[str, Any]:
    """Validate a registration and return the normalized column values.

    :raises ValidationFailedError: With every failing field.
    """
    data = asdict(dto)
    values = _load(_create_rules, data)
    values.setdefault("fixed_number", None)
    values.setdefault("mobile_number", None)
    values.pop("password")
    return values


def validate_update(
    dto: AccountUpdateIn,
    *,
    current_fixed: str | None,
    current_mobile: str | None,
) -> dict[str, Any]:
    """Validate a partial update and return only the fields to change.

    The phone rule is checked against the resulting state, so clearing the
    only remaining number is rejected.

    :raises ValidationFailedError: With every failing field.
    """
    data = {key: value for key, value in asdict(dto).items() if value is not None}
    return _load(_update_rules, data, current_fixed=current_fixed, current_mobile=current_mobile)
