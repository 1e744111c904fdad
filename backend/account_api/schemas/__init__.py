"""Convenience exports for application schemas."""

from __future__ import annotations

from .account import (
    AccountCreateSchema,
    AccountDeleteQuerySchema,
    AccountSchema,
    AccountUpdateSchema,
    PasswordChangeSchema,
)
from .auth import LoginSchema, LogoutSchema, RefreshSchema, TokenPairSchema
from .common import BaseSchema, SortQuerySchema
from .prefecture import PrefectureSchema

__all__ = [
    "AccountCreateSchema",
    "AccountDeleteQuerySchema",
    "AccountSchema",
    "AccountUpdateSchema",
    "PasswordChangeSchema",
    "LoginSchema",
    "LogoutSchema",
    "RefreshSchema",
    "TokenPairSchema",
    "BaseSchema",
    "SortQuerySchema",
    "PrefectureSchema",
]
