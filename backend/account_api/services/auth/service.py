# account_api/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from account_api.core.clock import as_utc, utcnow
from account_api.services._shared.base import BaseService, read_operation, write_operation
from account_api.services._shared.errors import (
    InactiveAccountError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
)
from account_api.services._shared.ports import ACCESS, PasswordHasher, TokenProvider
from account_api.services.accounts.dto import AccountOut
from account_api.services.accounts.rules import normalize_email
from account_api.services.auth.dto import LoginIn, LogoutIn, LogoutOut, RefreshIn
from account_api.services.tokens.dto import TokenPairOut
from account_api.services.tokens.issuer import TokenIssuer

log = logging.getLogger(__name__)

# Verified against when the email is unknown so both failure paths cost one hash check.
TIMING_PLACEHOLDER = "timing-placeholder-Aa1!"


class AuthService(BaseService):
    """
    Session lifecycle service (login / authorize / refresh / logout).

    Session states: *Anonymous* → ``login`` → *Authenticated* → access window
    closes → *AccessExpired* → ``refresh`` → *Authenticated*; ``logout`` or
    the end of the refresh window are terminal, and a new ``login`` starts a
    fresh session.

    Security
    --------
    - Unknown email and wrong password fail with the same
      :class:`InvalidCredentialsError`, after the same amount of hashing work.
    - Inactivity is only revealed to a caller who knows the password.
    - ``authorize`` requires a valid signature *and* a live stored row, so a
      logged-out or rotated token stops working immediately.
    """

    def __init__(
        self,
        *,
        password_hasher: PasswordHasher,
        token_provider: TokenProvider,
        issuer: TokenIssuer,
        clock: Callable[[], datetime] = utcnow,
        placeholder_hash: str | None = None,
    ) -> None:
        """
        :param password_hasher: Verifies login passwords.
        :param token_provider: Verifies JWT signatures and claims.
        :param issuer: Creates, rotates and revokes stored token pairs.
        :param clock: Source of "now" (UTC, aware).
        :param placeholder_hash: Precomputed hash of :data:`TIMING_PLACEHOLDER`;
            hashed lazily on the first unknown-email login when omitted.
        """
        super().__init__()
        self.hasher = password_hasher
        self.tokens = token_provider
        self.issuer = issuer
        self.clock = clock
        self._placeholder_hash = placeholder_hash

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    @write_operation
    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :param dto: Login input.
        :returns: Access/Refresh token pair with their expiries.
        :raises InvalidCredentialsError: Unknown email or wrong password.
        :raises InactiveAccountError: Correct password, deactivated account.
        """
        email = normalize_email(dto.email)

        with self.rw_uow() as uow:
            account = uow.accounts.find_by_email(email)
            if account is None:
                self.hasher.verify(dto.password, self._placeholder())
                raise InvalidCredentialsError()
            if not self.hasher.verify(dto.password, account.password_hash):
                raise InvalidCredentialsError()
            if not account.is_active:
                raise InactiveAccountError()

            uow.accounts.touch_login(account, self.clock())
            pair = TokenPairOut.from_row(self.issuer.issue_in(uow, account.id))

        log.info("Login succeeded", extra={"account_id": pair.account_id})
        return pair

    # ------------------------------------------------------------------ #
    # Authorize
    # ------------------------------------------------------------------ #

    @read_operation
    def authorize(self, access_token: str | None) -> str:
        """
        Resolve a bearer access token to its account id.

        :raises UnauthorizedError: Missing, tampered, wrong-type, revoked or
            expired token.
        """
        with self.ro_uow() as uow:
            return self._resolve_access(uow, access_token)

    @read_operation
    def whoami(self, access_token: str | None) -> AccountOut:
        """
        Return the account owning ``access_token``.

        :raises UnauthorizedError: Per :meth:`authorize`.
        """
        with self.ro_uow() as uow:
            account_id = self._resolve_access(uow, access_token)
            account = uow.accounts.find_by_id(account_id)
            if account is None:
                raise NotFoundError("Account", account_id)
            return AccountOut.from_model(account)

    def _resolve_access(self, uow, access_token: str | None) -> str:
        # Runs inside the caller's unit of work and retry scope.
        if not access_token:
            raise UnauthorizedError("Missing access token")
        claims = self.tokens.decode(access_token)
        if claims.get("type") != ACCESS:
            raise UnauthorizedError("Access token required")

        row = uow.tokens.find_by_access(access_token)
        if row is None:
            raise UnauthorizedError("Token has been revoked")
        if as_utc(row.access_expired_at) < self.clock():
            raise UnauthorizedError("Token has expired")
        if str(claims.get("sub")) != row.account_id:
            raise UnauthorizedError("Token subject mismatch")
        return row.account_id

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate a refresh token and emit a new pair.

        The old pair is deleted in the same transaction that inserts the new
        one, so replaying the old refresh token fails.

        :raises NotFoundError: Unknown, already rotated or revoked token.
        :raises TokenExpiredError: Refresh window closed.
        """
        pair = self.issuer.refresh(dto.refresh_token)
        log.info("Token rotated", extra={"account_id": pair.account_id})
        return pair

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    @write_operation
    def logout(self, dto: LogoutIn) -> LogoutOut:
        """
        End the session identified by an access or refresh token.

        Idempotent for a single session. With ``all_sessions`` the token
        must still belong to a stored session so its account can be resolved.

        :raises UnauthorizedError: ``all_sessions`` with an unknown token.
        """
        if not dto.all_sessions:
            return LogoutOut(revoked=int(self.issuer.revoke(dto.token)))

        with self.rw_uow() as uow:
            row = uow.tokens.find_by_access(dto.token) or uow.tokens.find_by_refresh(dto.token)
            if row is None:
                raise UnauthorizedError("Unknown session")
            account_id = row.account_id
            revoked = uow.tokens.delete_by_account_id(account_id)

        log.info("Logged out everywhere", extra={"account_id": account_id, "removed": revoked})
        return LogoutOut(revoked=revoked)

    @write_operation
    def logout_all(self, account_id: str) -> LogoutOut:
        """Revoke every session of ``account_id``."""
        with self.rw_uow() as uow:
            revoked = uow.tokens.delete_by_account_id(account_id)
        log.info("Logged out everywhere", extra={"account_id": account_id, "removed": revoked})
        return LogoutOut(revoked=revoked)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _placeholder(self) -> str:
        if self._placeholder_hash is None:
            self._placeholder_hash = self.hasher.hash(TIMING_PLACEHOLDER)
        return self._placeholder_hash
