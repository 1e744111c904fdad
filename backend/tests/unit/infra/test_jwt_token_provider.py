"""Unit tests for :class:`account_api.infra.jwt.flask_jwt_token_provider.JWTTokenProvider`."""

from __future__ import annotations

from datetime import timedelta

import pytest

from account_api.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from account_api.services._shared.errors import UnauthorizedError
from account_api.services._shared.ports import ACCESS, REFRESH


@pytest.fixture()
def provider(app):
    with app.app_context():
        yield JWTTokenProvider()


def test_access_token_claims(provider):
    token = provider.create_access_token(identity="01ARZ3NDEKTSV4RRFFQ69G5FAV", expires_delta=timedelta(minutes=5))
    claims = provider.decode(token)
    assert claims["sub"] == "01ARZ3NDEKTSV4RRFFQ69G5FAV"
    assert claims["type"] == ACCESS
    assert claims["jti"]
    assert provider.get_subject(token) == "01ARZ3NDEKTSV4RRFFQ69G5FAV"


def test_refresh_token_type(provider):
    token = provider.create_refresh_token(identity="acc", expires_delta=timedelta(hours=1))
    assert provider.get_token_type(token) == REFRESH


def test_same_second_tokens_differ(provider):
    first = provider.create_access_token(identity="acc", expires_delta=timedelta(minutes=5))
    second = provider.create_access_token(identity="acc", expires_delta=timedelta(minutes=5))
    assert first != second


def test_expired_token(provider):
    token = provider.create_access_token(identity="acc", expires_delta=timedelta(seconds=-1))
    with pytest.raises(UnauthorizedError, match="expired"):
        provider.decode(token)


def test_tampered_token(provider):
    token = provider.create_access_token(identity="acc", expires_delta=timedelta(minutes=5))
    head, payload, signature = token.split(".")
    tampered = ".".join([head, payload, signature[::-1]])
    with pytest.raises(UnauthorizedError):
        provider.decode(tampered)


def test_garbage_token(provider):
    with pytest.raises(UnauthorizedError):
        provider.decode("garbage")
