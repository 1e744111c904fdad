"""Token repository: unique token strings, set-based deletes."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError

from account_api.models.jwt_token import JwtToken
from account_api.repositories.base import BaseRepository
from account_api.services._shared.errors import ConflictError, violates

# (index name on PostgreSQL, column reported by SQLite)
UNIQUE_TOKEN_COLUMNS = (
    ("jwt_tokens_access_index", "jwt_tokens.access"),
    ("jwt_tokens_refresh_index", "jwt_tokens.refresh"),
)


class JwtTokenRepository(BaseRepository[JwtToken]):
    """Persistence-only repository for :class:`JwtToken`.

    Rows are never updated in place. Deletes are issued as single
    ``DELETE`` statements and report the affected row count so concurrent
    callers can tell whether they won the race.
    """

    model = JwtToken

    # ---------------------------- Writes ----------------------------

    def save(self, token: JwtToken) -> JwtToken:
        """Insert a token pair inside a savepoint.

        :raises ConflictError: If the access or refresh string already exists.
        """
        try:
            return self.add(token)
        except IntegrityError as exc:
            for index, column in UNIQUE_TOKEN_COLUMNS:
                if violates(exc, index) or violates(exc, column):
                    raise ConflictError("JwtToken", f"{column} collision") from exc
            raise

    def delete_by_id(self, token_id: str) -> bool:
        """Delete one row; ``False`` when it was already gone."""
        result = self.session.execute(delete(JwtToken).where(JwtToken.id == token_id))
        return bool(result.rowcount)

    def delete_by_token(self, token: str) -> bool:
        """Delete the row whose access *or* refresh string equals ``token``."""
        result = self.session.execute(
            delete(JwtToken).where(or_(JwtToken.access == token, JwtToken.refresh == token))
        )
        return bool(result.rowcount)

    def delete_by_account_id(self, account_id: str) -> int:
        """Delete every row of an account (logout everywhere)."""
        result = self.session.execute(delete(JwtToken).where(JwtToken.account_id == account_id))
        return int(result.rowcount or 0)

    def delete_expired_before(self, moment: datetime) -> int:
        """Delete exactly the rows with ``refresh_expired_at < moment``.

        :returns: Number of rows removed; ``0`` when nothing had expired.
        """
        result = self.session.execute(
            delete(JwtToken)
            .where(JwtToken.refresh_expired_at < moment)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    # ---------------------------- Lookups ----------------------------

    def find_by_access(self, access: str) -> JwtToken | None:
        """Return the row carrying ``access`` or ``None``."""
        stmt = select(JwtToken).where(JwtToken.access == access)
        return cast(JwtToken | None, self.session.execute(stmt).scalars().first())

    def find_by_refresh(self, refresh: str) -> JwtToken | None:
        """Return the row carrying ``refresh`` or ``None``."""
        stmt = select(JwtToken).where(JwtToken.refresh == refresh)
        return cast(JwtToken | None, self.session.execute(stmt).scalars().first())

    def count_by_account_id(self, account_id: str) -> int:
        """Count the token rows an account owns."""
        stmt = select(func.count()).select_from(JwtToken).where(JwtToken.account_id == account_id)
        return int(self.session.execute(stmt).scalar_one())
