"""Unit tests for service-to-HTTP error translation."""

from __future__ import annotations

import pytest

from account_api.core import errors as api_errors
from account_api.services._shared.base import BaseService
from account_api.services._shared.errors import (
    ConflictError,
    InactiveAccountError,
    InvalidCredentialsError,
    NotFoundError,
    StoreUnavailableError,
    TokenExpiredError,
    UnauthorizedError,
    ValidationFailedError,
)


@pytest.mark.parametrize(
    ("exc", "status", "code"),
    [
        (NotFoundError("Account", "x"), 404, "not_found"),
        (ConflictError("Account", "email already in use"), 409, "conflict"),
        (InvalidCredentialsError(), 401, "invalid_credentials"),
        (InactiveAccountError(), 403, "account_inactive"),
        (TokenExpiredError(), 401, "token_expired"),
        (UnauthorizedError(), 401, "unauthorized"),
        (ValidationFailedError({"email": ["bad"]}), 422, "validation_error"),
        (StoreUnavailableError(), 503, "service_unavailable"),
    ],
)
def test_translation(exc, status, code):
    translated = BaseService().translate_exceptions(exc)
    assert isinstance(translated, api_errors.APIError)
    assert translated.status_code == status
    assert translated.code == code


def test_non_service_errors_pass_through():
    exc = KeyError("x")
    assert BaseService().translate_exceptions(exc) is exc
