"""Prefecture reference table (region code -> name)."""

from __future__ import annotations

from sqlalchemy import SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from account_api.core.extensions import db


class Prefecture(db.Model):
    """
    One of the 47 Japanese prefectures.

    Fields
    ------
    code : int
        Region code (1..47); the identity of the row.
    name : str
        Display name, e.g. ``東京都``.
    """

    __tablename__ = "prefectures"

    code: Mapped[int] = mapped_column(SmallInteger, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(10), nullable=False)

    def __repr__(self) -> str:
        return f"<Prefecture code={self.code} name={self.name}>"
