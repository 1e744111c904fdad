"""Shared API helpers: service wiring, bearer authentication and timing."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from account_api.infra.hashing.werkzeug_password_hasher import WerkzeugPasswordHasher
from account_api.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from account_api.services._shared.base import ServiceContext
from account_api.services._shared.ports import PasswordHasher
from account_api.services.accounts import AccountService
from account_api.services.auth.service import TIMING_PLACEHOLDER, AuthService
from account_api.services.prefectures import PrefectureService
from account_api.services.tokens import TokenIssuer

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "bearer "


# ------------------------------- Service wiring -------------------------------


def get_password_hasher() -> PasswordHasher:
    """Return the app-wide password hasher built from configuration."""
    hasher = current_app.extensions.get("password_hasher")
    if hasher is None:
        hasher = WerkzeugPasswordHasher(
            method=current_app.config.get("PASSWORD_HASH_METHOD", "scrypt"),
            pepper=current_app.config.get("PASSWORD_PEPPER", ""),
        )
        current_app.extensions["password_hasher"] = hasher
    return cast(PasswordHasher, hasher)


def get_token_issuer() -> TokenIssuer:
    """Build a :class:`TokenIssuer`; fails fast on inconsistent TTLs."""
    cfg = current_app.config
    return TokenIssuer(
        token_provider=JWTTokenProvider(),
        access_ttl=timedelta(seconds=int(cfg["ACCESS_TOKEN_SECONDS"])),
        refresh_ttl=timedelta(seconds=int(cfg["REFRESH_TOKEN_SECONDS"])),
    )


def get_login_placeholder() -> str:
    """Return the app-wide hash verified against when a login email is unknown."""
    placeholder = current_app.extensions.get("login_placeholder")
    if placeholder is None:
        placeholder = get_password_hasher().hash(TIMING_PLACEHOLDER)
        current_app.extensions["login_placeholder"] = placeholder
    return cast(str, placeholder)


def get_auth_service() -> AuthService:
    return AuthService(
        password_hasher=get_password_hasher(),
        token_provider=JWTTokenProvider(),
        issuer=get_token_issuer(),
        placeholder_hash=get_login_placeholder(),
    )


def get_account_service() -> AccountService:
    return AccountService(password_hasher=get_password_hasher(), ctx=current_context())


def get_prefecture_service() -> PrefectureService:
    return PrefectureService(ctx=current_context())


def current_context() -> ServiceContext:
    """Request-scoped service context (authenticated account, request id)."""
    return ServiceContext(
        actor_id=getattr(g, "account_id", None),
        request_id=getattr(g, "request_id", None),
    )


# ------------------------------- Authentication -------------------------------


def bearer_token() -> str | None:
    """Return the token of an ``Authorization: Bearer <token>`` header, if any."""
    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


def require_account(func: F) -> F:
    """Authorize the bearer access token and expose ``g.account_id``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.account_id = get_auth_service().authorize(bearer_token())
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# ---------------------------------- Responses ----------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
