"""Reusable SQLAlchemy mixins shared by domain models (typed 2.0)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CHAR, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
from ulid import ULID

from account_api.core.clock import utcnow


def new_ulid() -> str:
    """Return a fresh 26-character, time-ordered ULID string."""
    return str(ULID())


class TimestampMixin:
    """Provide ``created_at`` and ``updated_at`` timestamp columns.

    Attributes
    ----------
    created_at:
        Timezone-aware timestamp set on insert.
    updated_at:
        Timezone-aware timestamp refreshed on every ORM update.

    Notes
    -----
    Values are produced in Python so sub-second ordering survives on engines
    whose ``now()`` has one-second resolution; the server default covers rows
    written outside the ORM (migrations, seeds).
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )


class ULIDPKMixin:
    """Expose a ``CHAR(26)`` ULID primary key column named ``id``.

    Attributes
    ----------
    id:
        Sortable identifier generated client-side on insert; never reassigned.
    """

    id: Mapped[str] = mapped_column(CHAR(26), primary_key=True, default=new_ulid)


class ReprMixin:
    """Provide a concise ``__repr__`` including the class name and id."""

    def __repr__(self) -> str:
        """Return a short and useful string representation.

        :returns: Debug-friendly ``<ClassName id=...>``.
        :rtype: str
        """
        cls = self.__class__.__name__
        key = getattr(self, "id", None)
        return f"<{cls} id={key}>"
