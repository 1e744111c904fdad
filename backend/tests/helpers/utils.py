"""Tiny helpers shared across test modules."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import timedelta

from tests.factories.account import DEFAULT_PASSWORD


@contextmanager
def not_raises(exception: type[BaseException]):
    """Context manager asserting that an exception is *not* raised.

    Parameters
    ----------
    exception: type[BaseException]
        Exception type that should not be raised within the context.

    Yields
    ------
    None
        Control enters the managed block when the exception is absent.
    """
    try:
        yield
    except exception as exc:  # pragma: no cover
        raise AssertionError(f"Did raise {exception}: {exc}") from exc


API = "/api/v1"

# Service-level token lifetimes used with the stub providers.
ACCESS_TTL = timedelta(minutes=15)
REFRESH_TTL = timedelta(days=7)


def register_payload(**overrides) -> dict:
    """Return a valid registration body; ``overrides`` replace fields."""
    payload = {
        "email": "user@example.com",
        "name": "山田太郎",
        "password": DEFAULT_PASSWORD,
        "postal_code": "100-0001",
        "prefecture_code": 13,
        "address_details": "千代田区千代田1-1",
        "mobile_number": "090-1234-5678",
    }
    payload.update(overrides)
    return payload


def register(client, **overrides) -> dict:
    """Register through the API and return the created account."""
    resp = client.post(f"{API}/auth/register", json=register_payload(**overrides))
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


def login(client, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    """Log in through the API and return the issued token pair."""
    resp = client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["data"]


def auth_header(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}
