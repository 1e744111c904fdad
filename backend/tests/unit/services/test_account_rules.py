"""Unit tests for :mod:`account_api.services.accounts.rules`."""

from __future__ import annotations

import pytest

from account_api.services._shared.errors import ValidationFailedError
from account_api.services.accounts import rules
from account_api.services.accounts.dto import AccountCreateIn, AccountUpdateIn


def _create_in(**overrides) -> AccountCreateIn:
    data = {
        "email": "  Saburo@Example.COM ",
        "name": " 三郎 ",
        "password": "Str0ng!pass",
        "postal_code": "060-0001",
        "prefecture_code": 1,
        "address_details": "札幌市中央区北1条西1",
        "mobile_number": "090-1111-2222",
    }
    data.update(overrides)
    return AccountCreateIn(**data)


class TestCreate:
    def test_values_are_normalized(self):
        values = rules.validate_create(_create_in(fixed_number="  "))

        assert values["email"] == "saburo@example.com"
        assert values["name"] == "三郎"
        assert values["fixed_number"] is None
        assert values["mobile_number"] == "090-1111-2222"
        assert "password" not in values

    @pytest.mark.parametrize(
        "email",
        ["a@b..com", "a..b@x.com", "<x>@y.com", "a@-x.com", "no-at-sign", "a@b"],
    )
    def test_malformed_emails_are_rejected(self, email):
        with pytest.raises(ValidationFailedError) as exc:
            rules.validate_create(_create_in(email=email))
        assert set(exc.value.errors) == {"email"}

    def test_overlong_email(self):
        email = "a" * 250 + "@example.com"
        with pytest.raises(ValidationFailedError) as exc:
            rules.validate_create(_create_in(email=email))
        assert "email" in exc.value.errors

    def test_every_failing_field_is_reported(self):
        dto = _create_in(
            name="x",
            password="weak",
            postal_code="0600001",
            prefecture_code=48,
            address_details=" ",
            mobile_number="12-34",
        )
        with pytest.raises(ValidationFailedError) as exc:
            rules.validate_create(dto)
        assert set(exc.value.errors) == {
            "name",
            "password",
            "postal_code",
            "prefecture_code",
            "address_details",
            "mobile_number",
        }

    def test_invalid_phone_is_not_reported_as_missing(self):
        with pytest.raises(ValidationFailedError) as exc:
            rules.validate_create(_create_in(mobile_number="abc"))
        assert "mobile_number" in exc.value.errors
        assert "phone" not in exc.value.errors

    def test_at_least_one_phone(self):
        with pytest.raises(ValidationFailedError) as exc:
            rules.validate_create(_create_in(mobile_number=None))
        assert exc.value.errors["phone"] == [rules.PHONE_MESSAGE]


class TestPassword:
    def test_strong_password(self):
        assert rules.check_password("Str0ng!pass") == []

    @pytest.mark.parametrize(
        ("password", "missing"),
        [
            ("STR0NG!PASS", "lowercase"),
            ("str0ng!pass", "uppercase"),
            ("Strong!pass", "digit"),
            ("Str0ngpass1", "symbol"),
        ],
    )
    def test_each_class_is_required(self, password, missing):
        problems = rules.check_password(password)
        assert len(problems) == 1
        assert missing in problems[0]

    def test_short_password_lists_every_problem(self):
        assert len(rules.check_password("a")) == 4


class TestUpdate:
    def test_only_given_fields_are_returned(self):
        updates = rules.validate_update(
            AccountUpdateIn(name=" 新しい名前 ", is_active=False),
            current_fixed=None,
            current_mobile="090-1111-2222",
        )
        assert updates == {"name": "新しい名前", "is_active": False}

    def test_blank_phone_clears_it(self):
        updates = rules.validate_update(
            AccountUpdateIn(fixed_number=""),
            current_fixed="03-1234-5678",
            current_mobile="090-1111-2222",
        )
        assert updates == {"fixed_number": None}

    def test_clearing_the_last_phone(self):
        with pytest.raises(ValidationFailedError) as exc:
            rules.validate_update(
                AccountUpdateIn(mobile_number=""),
                current_fixed=None,
                current_mobile="090-1111-2222",
            )
        assert "phone" in exc.value.errors

    def test_malformed_email(self):
        with pytest.raises(ValidationFailedError) as exc:
            rules.validate_update(
                AccountUpdateIn(email="a@b..com"),
                current_fixed=None,
                current_mobile="090-1111-2222",
            )
        assert set(exc.value.errors) == {"email"}
