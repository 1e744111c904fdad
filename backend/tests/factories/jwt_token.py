"""Factory Boy definition for :class:`account_api.models.jwt_token.JwtToken`."""

from __future__ import annotations

from datetime import timedelta

import factory

from account_api.core.clock import utcnow
from account_api.models.jwt_token import JwtToken
from tests.factories import BaseFactory
from tests.factories.account import AccountFactory


class JwtTokenFactory(BaseFactory):
    """Build persisted token pairs with a live access and refresh window."""

    class Meta:
        model = JwtToken

    account = factory.SubFactory(AccountFactory)
    access = factory.Sequence(lambda n: f"access-token-{n}")
    access_expired_at = factory.LazyFunction(lambda: utcnow() + timedelta(minutes=15))
    refresh = factory.Sequence(lambda n: f"refresh-token-{n}")
    refresh_expired_at = factory.LazyFunction(lambda: utcnow() + timedelta(days=7))
