"""Account model: the authentication identity and its postal profile."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CHAR,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    SmallInteger,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from account_api.core.extensions import db

from .base import ReprMixin, TimestampMixin, ULIDPKMixin

if TYPE_CHECKING:
    from .jwt_token import JwtToken
    from .prefecture import Prefecture


class Account(ULIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Registered account.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed); unique.
    name : str
        Display name (2..20 characters).
    password_hash : str
        Hash produced by the configured password hasher (column ``password``).
    is_active : bool
        Inactive accounts cannot log in.
    fixed_number, mobile_number : str | None
        Phone numbers; at least one of them is present.
    postal_code : str
        ``NNN-NNNN`` postal code.
    prefecture_code : int
        Referenced prefecture; the prefecture cannot be deleted while referenced.
    address_details : str
        Remaining address after the prefecture.
    logged_in_at : datetime | None
        Last successful login.
    """

    __tablename__ = "accounts"

    email: Mapped[str] = mapped_column(String(256), nullable=False)
    name: Mapped[str] = mapped_column(String(20), nullable=False)
    password_hash: Mapped[str] = mapped_column("password", String(512), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    fixed_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    mobile_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    postal_code: Mapped[str] = mapped_column(CHAR(8), nullable=False)
    prefecture_code: Mapped[int] = mapped_column(
        SmallInteger,
        ForeignKey(
            "prefectures.code",
            name="accounts_prefecture_code_to_prefectures",
            ondelete="RESTRICT",
        ),
        nullable=False,
    )
    address_details: Mapped[str] = mapped_column(String(100), nullable=False)
    logged_in_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    prefecture: Mapped[Prefecture] = relationship(lazy="joined", innerjoin=True)
    tokens: Mapped[list[JwtToken]] = relationship(
        back_populates="account",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("accounts_email_index", "email", unique=True),)

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize email to its stored form.

        :param key: Field name (``email``).
        :param value: Email to normalize.
        :returns: Lowercased, trimmed email.
        :raises ValueError: If email is missing.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        return value.strip().lower()

    @validates("id")
    def _freeze_id(self, key: str, value: str) -> str:
        """Reject reassigning the identifier of a persisted account."""
        current = self.__dict__.get("id")
        if current is not None and current != value:
            raise ValueError("Account id is immutable.")
        return value
