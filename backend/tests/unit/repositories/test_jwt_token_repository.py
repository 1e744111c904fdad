"""Unit tests for :class:`account_api.repositories.jwt_token.JwtTokenRepository`."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from account_api.core.clock import utcnow
from account_api.models import JwtToken
from account_api.repositories import JwtTokenRepository
from account_api.services._shared.errors import ConflictError
from tests.factories.account import AccountFactory
from tests.factories.jwt_token import JwtTokenFactory


@pytest.fixture()
def repo(session):
    return JwtTokenRepository(session=session)


def _pair(account_id: str, access: str, refresh: str) -> JwtToken:
    now = utcnow()
    return JwtToken(
        account_id=account_id,
        access=access,
        access_expired_at=now + timedelta(minutes=15),
        refresh=refresh,
        refresh_expired_at=now + timedelta(days=1),
    )


class TestSave:
    def test_save_and_find(self, repo):
        account = AccountFactory()
        saved = repo.save(_pair(account.id, "a-1", "r-1"))
        assert repo.find_by_access("a-1").id == saved.id
        assert repo.find_by_refresh("r-1").id == saved.id

    def test_duplicate_access_is_conflict(self, repo):
        existing = JwtTokenFactory(access="same-access")
        with pytest.raises(ConflictError):
            repo.save(_pair(existing.account_id, "same-access", "other-refresh"))

    def test_duplicate_refresh_is_conflict(self, repo):
        existing = JwtTokenFactory(refresh="same-refresh")
        with pytest.raises(ConflictError):
            repo.save(_pair(existing.account_id, "other-access", "same-refresh"))

    def test_session_usable_after_conflict(self, repo):
        existing = JwtTokenFactory(access="taken")
        with pytest.raises(ConflictError):
            repo.save(_pair(existing.account_id, "taken", "r-x"))
        repo.save(_pair(existing.account_id, "free", "r-y"))
        assert repo.count_by_account_id(existing.account_id) == 2


class TestDeletes:
    def test_delete_by_id_reports_outcome(self, repo):
        token = JwtTokenFactory()
        assert repo.delete_by_id(token.id) is True
        assert repo.delete_by_id(token.id) is False

    def test_delete_by_token_matches_access_or_refresh(self, repo):
        first = JwtTokenFactory()
        second = JwtTokenFactory()
        assert repo.delete_by_token(first.access) is True
        assert repo.delete_by_token(second.refresh) is True
        assert repo.delete_by_token("unknown") is False

    def test_delete_by_account_id(self, repo):
        account = AccountFactory()
        JwtTokenFactory.create_batch(3, account=account)
        other = JwtTokenFactory()
        assert repo.delete_by_account_id(account.id) == 3
        assert repo.count_by_account_id(other.account_id) == 1

    def test_delete_expired_before_is_exact(self, repo):
        now = utcnow()
        expired = JwtTokenFactory(
            access_expired_at=now - timedelta(hours=2),
            refresh_expired_at=now - timedelta(hours=1),
        )
        live = JwtTokenFactory()
        expired_refresh, live_refresh = expired.refresh, live.refresh

        assert repo.delete_expired_before(now) == 1
        assert repo.find_by_refresh(expired_refresh) is None
        assert repo.find_by_refresh(live_refresh) is not None

    def test_delete_expired_before_keeps_boundary_row(self, repo):
        cutoff = datetime(2030, 1, 1, 12, 0, 0, 500, tzinfo=timezone.utc)
        boundary = JwtTokenFactory(
            access_expired_at=cutoff - timedelta(minutes=15),
            refresh_expired_at=cutoff,
        )
        boundary_refresh = boundary.refresh

        assert repo.delete_expired_before(cutoff) == 0
        assert repo.find_by_refresh(boundary_refresh) is not None
        assert repo.delete_expired_before(cutoff + timedelta(microseconds=1)) == 1

    def test_delete_expired_before_is_idempotent(self, repo):
        now = utcnow()
        JwtTokenFactory(
            access_expired_at=now - timedelta(hours=2),
            refresh_expired_at=now - timedelta(hours=1),
        )
        assert repo.delete_expired_before(now) == 1
        assert repo.delete_expired_before(now) == 0
