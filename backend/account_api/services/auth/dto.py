# account_api/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: Login email (normalized before lookup).
    :type email: str
    :param password: Raw password.
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token rotation.

    :param refresh_token: Refresh token received at login or last rotation.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param token: Access or refresh token of the session to end.
    :type token: str
    :param all_sessions: Also end every other session of the same account.
    :type all_sessions: bool
    """

    token: str
    all_sessions: bool = False


# ---------------------------- Output DTOs --------------------------------- #


@dataclass(frozen=True, slots=True)
class LogoutOut:
    """
    Output DTO for logout.

    :param revoked: Number of token pairs removed (0 when already gone).
    :type revoked: int
    """

    revoked: int
