"""Issued access/refresh token pairs."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CHAR, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from account_api.core.extensions import db

from .base import ReprMixin, ULIDPKMixin

if TYPE_CHECKING:
    from .account import Account


class JwtToken(ULIDPKMixin, ReprMixin, db.Model):
    """
    One login session: an access token and the refresh token paired with it.

    Rows are immutable; rotation deletes the row and inserts a new one.
    Deleting the owning account deletes its rows (``ON DELETE CASCADE``).
    """

    __tablename__ = "jwt_tokens"

    account_id: Mapped[str] = mapped_column(
        CHAR(26),
        ForeignKey("accounts.id", name="jwt_tokens_id_to_accounts", ondelete="CASCADE"),
        nullable=False,
    )
    access: Mapped[str] = mapped_column(String(8192), nullable=False)
    access_expired_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    refresh: Mapped[str] = mapped_column(String(8192), nullable=False)
    refresh_expired_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    account: Mapped[Account] = relationship(back_populates="tokens")

    __table_args__ = (
        Index("jwt_tokens_access_index", "access", unique=True),
        Index("jwt_tokens_refresh_index", "refresh", unique=True),
    )
