"""Account repository: email uniqueness, lookups and cascade-aware deletion."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, cast

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from account_api.core.clock import utcnow
from account_api.models.account import Account
from account_api.models.jwt_token import JwtToken
from account_api.repositories.base import BaseRepository
from account_api.services._shared.errors import ConflictError, NotFoundError, violates

EMAIL_INDEX = "accounts_email_index"


def _is_email_collision(exc: IntegrityError) -> bool:
    # PostgreSQL names the index; SQLite names the column.
    return violates(exc, EMAIL_INDEX) or violates(exc, "accounts.email")


class AccountRepository(BaseRepository[Account]):
    """Persistence-only repository for :class:`Account`.

    Every write refreshes ``updated_at`` through the model's ``onupdate``
    hook, and unique violations on the email index surface as
    :class:`ConflictError`.
    """

    model = Account

    # ---------------------------- Whitelists ----------------------------

    def _sortable_fields(self):
        return {
            "created_at": Account.created_at,
            "email": Account.email,
            "name": Account.name,
        }

    def _filterable_fields(self):
        return {
            "email": Account.email,
            "is_active": Account.is_active,
            "prefecture_code": Account.prefecture_code,
        }

    def _updatable_fields(self):
        """Profile fields; the id, password and timestamps are excluded."""
        return {
            "email",
            "name",
            "is_active",
            "fixed_number",
            "mobile_number",
            "postal_code",
            "prefecture_code",
            "address_details",
        }

    # ---------------------------- Lookups ----------------------------

    def find_by_id(self, account_id: str) -> Account | None:
        """Return the account with ``account_id`` or ``None``."""
        return self.get(account_id)

    def find_by_email(self, email: str) -> Account | None:
        """Fetch an account by email (case-insensitive).

        :param email: Email address to normalise and search.
        :returns: Account or ``None`` when not found.
        """
        stmt = select(Account).where(Account.email == email.strip().lower())
        return cast(Account | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str, *, exclude_id: str | None = None) -> bool:
        """Return ``True`` when another account already uses ``email``."""
        stmt = select(Account.id).where(Account.email == email.strip().lower())
        if exclude_id is not None:
            stmt = stmt.where(Account.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def list_accounts(self, *, sort: list[str] | None = None) -> list[Account]:
        """Return all accounts, oldest first unless ``sort`` says otherwise."""
        return self.list(sort=sort or ["created_at"])

    def count_active_tokens(self, account_id: str, *, now: datetime | None = None) -> int:
        """Count token rows whose refresh window is still open."""
        moment = now or utcnow()
        stmt = (
            select(func.count())
            .select_from(JwtToken)
            .where(JwtToken.account_id == account_id, JwtToken.refresh_expired_at >= moment)
        )
        return int(self.session.execute(stmt).scalar_one())

    # ---------------------------- Writes ----------------------------

    def create(self, account: Account) -> Account:
        """Insert a new account.

        :raises ConflictError: If the email is already registered.
        """
        if self.exists_by_email(account.email):
            raise ConflictError("Account", "email already in use")
        try:
            return self.add(account)
        except IntegrityError as exc:
            if _is_email_collision(exc):
                raise ConflictError("Account", "email already in use") from exc
            raise

    def update(self, account_id: str, fields: Mapping[str, Any]) -> Account:
        """Apply whitelisted profile changes to an existing account.

        :raises NotFoundError: If no account has ``account_id``.
        :raises ConflictError: If the new email belongs to another account.
        """
        account = self.get_for_update(account_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        email = fields.get("email")
        if email is not None and self.exists_by_email(email, exclude_id=account_id):
            raise ConflictError("Account", "email already in use")
        try:
            self.assign_updates(account, fields)
        except IntegrityError as exc:
            if _is_email_collision(exc):
                raise ConflictError("Account", "email already in use") from exc
            raise
        if "prefecture_code" in fields:
            # The joined prefecture still points at the old row after a code change.
            self.session.refresh(account, ["prefecture"])
        return account

    def change_password(self, account_id: str, password_hash: str) -> Account:
        """Store a new password hash.

        :raises NotFoundError: If no account has ``account_id``.
        """
        account = self.get_for_update(account_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        with self.savepoint():
            account.password_hash = password_hash
        return account

    def touch_login(self, account: Account, at: datetime) -> None:
        """Record a successful login at ``at``."""
        with self.savepoint():
            account.logged_in_at = at

    def delete(self, account_id: str, *, cascade: bool = False) -> None:
        """Hard-delete an account.

        While the account still owns tokens whose refresh window is open the
        delete is refused unless ``cascade`` is set; the store's
        ``ON DELETE CASCADE`` then removes every token row.

        :raises NotFoundError: If no account has ``account_id``.
        :raises ConflictError: If live tokens exist and ``cascade`` is false.
        """
        account = self.get(account_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        if not cascade and self.count_active_tokens(account_id) > 0:
            raise ConflictError("Account", "account still has active sessions")
        self.remove(account)
