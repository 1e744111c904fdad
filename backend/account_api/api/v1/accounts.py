"""Account endpoints (bearer access token required)."""

from __future__ import annotations

from flask import Blueprint, g, request

from account_api.api.deps import get_account_service, json_response, require_account, timing
from account_api.core.errors import Forbidden
from account_api.schemas import (
    AccountDeleteQuerySchema,
    AccountSchema,
    AccountUpdateSchema,
    PasswordChangeSchema,
    SortQuerySchema,
)
from account_api.services.accounts.dto import AccountUpdateIn, PasswordChangeIn

bp = Blueprint("accounts", __name__, url_prefix="/accounts")

account_schema = AccountSchema()
account_list_schema = AccountSchema(many=True)
account_update_schema = AccountUpdateSchema()
password_change_schema = PasswordChangeSchema()
delete_query_schema = AccountDeleteQuerySchema()
sort_schema = SortQuerySchema()


def _ensure_owner(account_id: str) -> None:
    # Only the account holder may modify or delete an account.
    if g.account_id != account_id:
        raise Forbidden("You can only modify your own account")


@bp.get("")
@require_account
@timing
def list_accounts():
    """Return every account ordered by creation time."""

    query = sort_schema.load(request.args)
    accounts = get_account_service().list(sort=query["sort"])
    return json_response({"data": account_list_schema.dump(accounts)})


@bp.get("/<string:account_id>")
@require_account
@timing
def get_account(account_id: str):
    """Return one account."""

    account = get_account_service().get(account_id)
    return json_response({"data": account_schema.dump(account)})


@bp.patch("/<string:account_id>")
@require_account
@timing
def update_account(account_id: str):
    """Partially update the caller's own account."""

    _ensure_owner(account_id)
    payload = account_update_schema.load(request.get_json(silent=True) or {})
    account = get_account_service().update(account_id, AccountUpdateIn(**payload))
    return json_response({"data": account_schema.dump(account)})


@bp.delete("/<string:account_id>")
@require_account
@timing
def delete_account(account_id: str):
    """Delete the caller's own account; ``?cascade=true`` ends live sessions too."""

    _ensure_owner(account_id)
    query = delete_query_schema.load(request.args)
    get_account_service().delete(account_id, cascade=query["cascade"])
    return "", 204


@bp.post("/<string:account_id>/password")
@require_account
@timing
def change_password(account_id: str):
    """Change the caller's own password."""

    _ensure_owner(account_id)
    data = password_change_schema.load(request.get_json(silent=True) or {})
    get_account_service().change_password(
        PasswordChangeIn(
            account_id=account_id,
            old_password=data["old_password"],
            new_password=data["new_password"],
        )
    )
    return "", 204
