"""
Abstract Unit of Work contracts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from account_api.repositories import (
        AccountRepository,
        JwtTokenRepository,
        PrefectureRepository,
    )


class SupportsCommit(Protocol):
    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class UnitOfWork(ABC):
    """
    Coordinates a transactional boundary for a use-case.

    Responsibilities:
    - Provide ``prefectures``, ``accounts`` and ``tokens`` repositories bound
      to the same session/transaction.
    - Commit on success, rollback on error (including an aborted request).
    """

    prefectures: PrefectureRepository
    accounts: AccountRepository
    tokens: JwtTokenRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
