"""Repository package exposing persistence-layer access for all aggregates."""

from __future__ import annotations

from account_api.repositories.account import AccountRepository
from account_api.repositories.base import BaseRepository, apply_sorting, parse_sort_tokens
from account_api.repositories.jwt_token import JwtTokenRepository
from account_api.repositories.prefecture import PrefectureRepository

__all__ = [
    "BaseRepository",
    "apply_sorting",
    "parse_sort_tokens",
    "AccountRepository",
    "JwtTokenRepository",
    "PrefectureRepository",
]
