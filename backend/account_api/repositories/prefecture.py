"""Prefecture repository (read-mostly reference data)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from account_api.models.prefecture import Prefecture
from account_api.repositories.base import BaseRepository
from account_api.services._shared.errors import ConflictError, violates

PREFECTURE_FK = "accounts_prefecture_code_to_prefectures"


class PrefectureRepository(BaseRepository[Prefecture]):
    """Persistence-only repository for :class:`Prefecture`."""

    model = Prefecture

    def _pk_attr(self):
        return Prefecture.code

    def _sortable_fields(self):
        return {"code": Prefecture.code, "name": Prefecture.name}

    def get_by_code(self, code: int) -> Prefecture | None:
        """Return the prefecture with ``code`` or ``None``."""
        return self.get(code)

    def list_all(self) -> list[Prefecture]:
        """Return every prefecture ordered by code."""
        return list(self.session.execute(select(Prefecture).order_by(Prefecture.code)).scalars())

    def delete(self, prefecture: Prefecture) -> None:
        """Delete a prefecture that no account references.

        :raises ConflictError: When the store rejects the delete because an
            account still references the code (``ON DELETE RESTRICT``).
        """
        try:
            self.remove(prefecture)
        except IntegrityError as exc:
            # SQLite reports a bare "FOREIGN KEY constraint failed"
            if violates(exc, PREFECTURE_FK) or violates(exc, "foreign key"):
                raise ConflictError("Prefecture", "still referenced by accounts") from exc
            raise
