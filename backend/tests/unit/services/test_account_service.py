"""Unit tests for :class:`account_api.services.accounts.AccountService`."""

from __future__ import annotations

import pytest

from account_api.models import Account
from account_api.repositories import JwtTokenRepository
from account_api.services._shared.errors import (
    ConflictError,
    InactiveAccountError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationFailedError,
)
from account_api.services.accounts.dto import AccountCreateIn, AccountUpdateIn, PasswordChangeIn
from account_api.services.auth.dto import LoginIn
from tests.factories.account import DEFAULT_PASSWORD, AccountFactory
from tests.factories.jwt_token import JwtTokenFactory
from tests.factories.prefecture import PrefectureFactory


def _create_in(**overrides) -> AccountCreateIn:
    data = {
        "email": "Jiro@Example.com",
        "name": "次郎",
        "password": "Str0ng!pass",
        "postal_code": "530-0001",
        "prefecture_code": 27,
        "address_details": "大阪市北区梅田1-1",
        "mobile_number": "080-1234-5678",
    }
    data.update(overrides)
    return AccountCreateIn(**data)


class TestRegister:
    def test_register(self, account_service, session):
        PrefectureFactory(code=27, name="大阪府")
        out = account_service.register(_create_in())

        assert out.email == "jiro@example.com"
        assert out.is_active is True
        assert out.prefecture_name == "大阪府"
        assert out.fixed_number is None

    def test_register_stores_hash_not_password(self, account_service, hasher, session):
        PrefectureFactory(code=27, name="大阪府")
        out = account_service.register(_create_in())

        stored = session.get(Account, out.id)
        assert stored.password_hash != "Str0ng!pass"
        assert hasher.verify("Str0ng!pass", stored.password_hash)

    def test_duplicate_email(self, account_service, session):
        PrefectureFactory(code=27, name="大阪府")
        AccountFactory(email="jiro@example.com")
        with pytest.raises(ConflictError):
            account_service.register(_create_in())

    def test_unknown_prefecture(self, account_service, session):
        with pytest.raises(NotFoundError):
            account_service.register(_create_in(prefecture_code=46))

    def test_collects_every_failing_field(self, account_service, session):
        with pytest.raises(ValidationFailedError) as exc:
            account_service.register(
                _create_in(
                    email="nope",
                    name="x",
                    password="weak",
                    postal_code="5300001",
                    prefecture_code=48,
                    mobile_number=None,
                )
            )
        assert set(exc.value.errors) == {
            "email",
            "name",
            "password",
            "postal_code",
            "prefecture_code",
            "phone",
        }


class TestQueries:
    def test_get(self, account_service, session):
        account = AccountFactory()
        assert account_service.get(account.id).id == account.id

    def test_get_unknown(self, account_service, session):
        with pytest.raises(NotFoundError):
            account_service.get("01ARZ3NDEKTSV4RRFFQ69G5FAV")

    def test_list_is_oldest_first(self, account_service, session):
        first = AccountFactory()
        second = AccountFactory()
        ids = [a.id for a in account_service.list()]
        assert ids.index(first.id) < ids.index(second.id)


class TestUpdate:
    def test_partial_update(self, account_service, session):
        account = AccountFactory(name="before")
        out = account_service.update(account.id, AccountUpdateIn(name="after"))
        assert out.name == "after"
        assert out.postal_code == account.postal_code

    def test_clearing_last_phone_is_rejected(self, account_service, session):
        account = AccountFactory(fixed_number=None, mobile_number="090-1234-5678")
        with pytest.raises(ValidationFailedError) as exc:
            account_service.update(account.id, AccountUpdateIn(mobile_number=""))
        assert "phone" in exc.value.errors

    def test_clearing_one_of_two_phones(self, account_service, session):
        account = AccountFactory(fixed_number="03-1234-5678", mobile_number="090-1234-5678")
        out = account_service.update(account.id, AccountUpdateIn(mobile_number=""))
        assert out.mobile_number is None
        assert out.fixed_number == "03-1234-5678"

    def test_move_to_another_prefecture_reports_new_name(self, account_service, session):
        PrefectureFactory(code=27, name="大阪府")
        account = AccountFactory()
        assert account.prefecture.name == "東京都"

        out = account_service.update(account.id, AccountUpdateIn(prefecture_code=27))

        assert out.prefecture_code == 27
        assert out.prefecture_name == "大阪府"

    def test_move_to_unknown_prefecture(self, account_service, session):
        account = AccountFactory()
        with pytest.raises(NotFoundError):
            account_service.update(account.id, AccountUpdateIn(prefecture_code=40))

    def test_deactivation_revokes_sessions(self, account_service, session):
        account = AccountFactory()
        JwtTokenFactory.create_batch(2, account=account)

        out = account_service.update(account.id, AccountUpdateIn(is_active=False))

        assert out.is_active is False
        assert JwtTokenRepository(session=session).count_by_account_id(account.id) == 0

    def test_deactivated_account_cannot_log_in(self, account_service, auth_service, session):
        account = AccountFactory()
        account_service.update(account.id, AccountUpdateIn(is_active=False))
        with pytest.raises(InactiveAccountError):
            auth_service.login(LoginIn(email=account.email, password=DEFAULT_PASSWORD))


class TestChangePassword:
    def test_change_password(self, account_service, auth_service, session):
        account = AccountFactory()
        account_service.change_password(
            PasswordChangeIn(account_id=account.id, old_password=DEFAULT_PASSWORD, new_password="N3w!secret")
        )
        pair = auth_service.login(LoginIn(email=account.email, password="N3w!secret"))
        assert pair.account_id == account.id

    def test_wrong_old_password(self, account_service, session):
        account = AccountFactory()
        with pytest.raises(InvalidCredentialsError):
            account_service.change_password(
                PasswordChangeIn(account_id=account.id, old_password="Wr0ng!pass", new_password="N3w!secret")
            )

    def test_weak_new_password(self, account_service, session):
        account = AccountFactory()
        with pytest.raises(ValidationFailedError) as exc:
            account_service.change_password(
                PasswordChangeIn(account_id=account.id, old_password=DEFAULT_PASSWORD, new_password="short")
            )
        assert "new_password" in exc.value.errors


class TestDelete:
    def test_delete_refused_with_live_sessions(self, account_service, session):
        token = JwtTokenFactory()
        with pytest.raises(ConflictError):
            account_service.delete(token.account_id)
        assert account_service.get(token.account_id)

    def test_cascade_delete(self, account_service, session):
        token = JwtTokenFactory()
        account_id = token.account_id

        account_service.delete(account_id, cascade=True)

        with pytest.raises(NotFoundError):
            account_service.get(account_id)
        assert JwtTokenRepository(session=session).count_by_account_id(account_id) == 0
