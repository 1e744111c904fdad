"""Shared service wiring with deterministic hashing and token stubs."""

from __future__ import annotations

from datetime import timedelta

import pytest

from account_api.services._shared.ports import StubPasswordHasher, StubTokenProvider
from account_api.services.accounts import AccountService
from account_api.services.auth.service import AuthService
from account_api.services.tokens import TokenIssuer
from tests.helpers.utils import ACCESS_TTL, REFRESH_TTL


class FakeClock:
    """Settable UTC clock."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture()
def clock():
    from account_api.core.clock import utcnow

    return FakeClock(utcnow())


@pytest.fixture()
def hasher():
    return StubPasswordHasher()


@pytest.fixture()
def token_provider():
    return StubTokenProvider()


@pytest.fixture()
def issuer(token_provider, clock):
    return TokenIssuer(
        token_provider=token_provider,
        access_ttl=ACCESS_TTL,
        refresh_ttl=REFRESH_TTL,
        clock=clock,
    )


@pytest.fixture()
def auth_service(hasher, token_provider, issuer, clock):
    return AuthService(
        password_hasher=hasher,
        token_provider=token_provider,
        issuer=issuer,
        clock=clock,
    )


@pytest.fixture()
def account_service(hasher):
    return AccountService(password_hasher=hasher)
