"""Unit tests for the read/write operation decorators."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from account_api.services._shared.base import read_operation, write_operation
from account_api.services._shared.errors import NotFoundError, StoreUnavailableError


def _operational_error() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("timeout"))


def test_read_retries_store_failures(app):
    calls = {"n": 0}

    @read_operation
    def flaky():
        calls["n"] += 1
        if calls["n"] == 1:
            raise _operational_error()
        return "ok"

    with app.app_context():
        assert flaky() == "ok"
    assert calls["n"] == 2


def test_read_gives_up_after_configured_attempts(app):
    calls = {"n": 0}

    @read_operation
    def down():
        calls["n"] += 1
        raise _operational_error()

    with app.app_context():
        with pytest.raises(StoreUnavailableError):
            down()
    assert calls["n"] == app.config["STORE_RETRY_ATTEMPTS"]


def test_read_does_not_retry_domain_errors(app):
    calls = {"n": 0}

    @read_operation
    def missing():
        calls["n"] += 1
        raise NotFoundError("Account", "x")

    with app.app_context():
        with pytest.raises(NotFoundError):
            missing()
    assert calls["n"] == 1


def test_write_is_not_retried():
    calls = {"n": 0}

    @write_operation
    def write():
        calls["n"] += 1
        raise _operational_error()

    with pytest.raises(StoreUnavailableError):
        write()
    assert calls["n"] == 1
