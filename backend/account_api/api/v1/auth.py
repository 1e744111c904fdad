"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from account_api.api.deps import (
    bearer_token,
    get_account_service,
    get_auth_service,
    json_response,
    timing,
)
from account_api.core.extensions import limiter
from account_api.schemas import (
    AccountCreateSchema,
    AccountSchema,
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    TokenPairSchema,
)
from account_api.services.accounts.dto import AccountCreateIn
from account_api.services.auth.dto import LoginIn, LogoutIn, RefreshIn

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = AccountCreateSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
account_schema = AccountSchema()
token_schema = TokenPairSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/register")
@timing
def register():
    """Register a new account and return its representation."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    account = get_account_service().register(AccountCreateIn(**payload))
    return json_response({"data": account_schema.dump(account)}, status=201)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue an access/refresh pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    pair = get_auth_service().login(LoginIn(email=data["email"], password=data["password"]))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token; the old pair stops working immediately."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    pair = get_auth_service().refresh(RefreshIn(refresh_token=data["refresh_token"]))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/logout")
@timing
def logout():
    """End a session by access or refresh token (idempotent).

    Without a body the bearer access token is used.
    """

    body = request.get_json(silent=True) or {}
    if "token" not in body and bearer_token():
        body = {**body, "token": bearer_token()}
    data = logout_schema.load(body)
    result = get_auth_service().logout(LogoutIn(token=data["token"], all_sessions=data["all_sessions"]))
    return json_response({"data": {"revoked": result.revoked}})


@bp.get("/whoami")
@timing
def whoami():
    """Return the account owning the bearer access token."""

    account = get_auth_service().whoami(bearer_token())
    return json_response({"data": account_schema.dump(account)})
