"""Unit tests for :class:`account_api.models.jwt_token.JwtToken`."""

from __future__ import annotations

from sqlalchemy import select

from account_api.core.clock import as_utc
from account_api.models import Account, JwtToken
from tests.factories.account import AccountFactory
from tests.factories.jwt_token import JwtTokenFactory


def test_access_expires_before_refresh(session):
    token = JwtTokenFactory()
    assert as_utc(token.access_expired_at) < as_utc(token.refresh_expired_at)


def test_tokens_belong_to_account(session):
    account = AccountFactory()
    JwtTokenFactory(account=account)
    JwtTokenFactory(account=account)
    session.refresh(account)
    assert len(account.tokens) == 2


def test_deleting_account_cascades_to_tokens(session):
    account = AccountFactory()
    JwtTokenFactory(account=account)
    account_id = account.id

    session.delete(session.get(Account, account_id))
    session.commit()

    rows = session.execute(select(JwtToken).where(JwtToken.account_id == account_id)).all()
    assert rows == []
