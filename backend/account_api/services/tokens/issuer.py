# account_api/services/tokens/issuer.py
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt

from account_api.core.clock import as_utc, utcnow
from account_api.models.jwt_token import JwtToken
from account_api.services._shared.base import BaseService, write_operation
from account_api.services._shared.errors import (
    ConflictError,
    NotFoundError,
    TokenExpiredError,
)
from account_api.services._shared.ports import TokenProvider
from account_api.services.tokens.dto import TokenPairOut
from account_api.uow.base import UnitOfWork

log = logging.getLogger(__name__)

DEFAULT_ISSUE_ATTEMPTS = 3


class TokenIssuer(BaseService):
    """
    Create, rotate and revoke persisted access/refresh token pairs.

    Every pair satisfies ``access_expired_at < refresh_expired_at``: both
    expiries are computed from the same instant and the refresh TTL must be
    strictly longer than the access TTL.

    The ``*_in`` methods run inside a caller-owned unit of work so that
    login and rotation stay a single transaction; the public methods open
    their own.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        clock: Callable[[], datetime] = utcnow,
        max_attempts: int = DEFAULT_ISSUE_ATTEMPTS,
    ) -> None:
        """
        :param token_provider: Signs the JWT strings.
        :param access_ttl: Lifetime of the access token.
        :param refresh_ttl: Lifetime of the refresh token.
        :param clock: Source of "now" (UTC, aware).
        :param max_attempts: Inserts tried before a token collision surfaces.
        :raises ValueError: If a TTL is not positive or ``refresh_ttl <= access_ttl``.
        """
        super().__init__()
        if access_ttl <= timedelta(0):
            raise ValueError("access_ttl must be positive")
        if refresh_ttl <= access_ttl:
            raise ValueError("refresh_ttl must be longer than access_ttl")
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.tokens = token_provider
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.clock = clock
        self.max_attempts = max_attempts

    # ------------------------------------------------------------------ #
    # Public API (own unit of work)
    # ------------------------------------------------------------------ #

    @write_operation
    def issue(self, account_id: str) -> TokenPairOut:
        """
        Issue and persist a new pair for an existing account.

        :raises NotFoundError: If the account does not exist.
        :raises ConflictError: If every attempt collided with a stored token.
        """
        with self.rw_uow() as uow:
            if uow.accounts.find_by_id(account_id) is None:
                raise NotFoundError("Account", account_id)
            return TokenPairOut.from_row(self.issue_in(uow, account_id))

    @write_operation
    def refresh(self, refresh_token: str) -> TokenPairOut:
        """
        Rotate a refresh token: delete its row and issue a new pair.

        :raises NotFoundError: If the refresh token is unknown or was rotated,
            revoked or swept concurrently.
        :raises TokenExpiredError: If the refresh window has closed.
        """
        with self.rw_uow() as uow:
            return TokenPairOut.from_row(self.refresh_in(uow, refresh_token))

    @write_operation
    def revoke(self, token: str) -> bool:
        """
        Delete the pair whose access *or* refresh string equals ``token``.

        Idempotent: an unknown token is not an error.

        :returns: ``True`` when a row was removed.
        """
        with self.rw_uow() as uow:
            return uow.tokens.delete_by_token(token)

    # ------------------------------------------------------------------ #
    # Building blocks (caller-owned unit of work)
    # ------------------------------------------------------------------ #

    def issue_in(self, uow: UnitOfWork, account_id: str) -> JwtToken:
        """Sign a fresh pair and insert it, retrying on a token collision."""
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            retry=retry_if_exception_type(ConflictError),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                number = attempt.retry_state.attempt_number
                if number > 1:
                    log.warning("Token collision, re-signing (attempt %d)", number)
                return uow.tokens.save(self._sign(account_id))

    def refresh_in(self, uow: UnitOfWork, refresh_token: str) -> JwtToken:
        row = uow.tokens.find_by_refresh(refresh_token)
        if row is None:
            raise NotFoundError("JwtToken", "refresh token")

        if as_utc(row.refresh_expired_at) < self.clock():
            raise TokenExpiredError()

        account_id = row.account_id
        # Conditional on the row still existing: a parallel refresh or the
        # sweep may have removed it since the lookup.
        if not uow.tokens.delete_by_id(row.id):
            raise NotFoundError("JwtToken", "refresh token")
        return self.issue_in(uow, account_id)

    def _sign(self, account_id: str) -> JwtToken:
        now = self.clock()
        return JwtToken(
            account_id=account_id,
            access=self.tokens.create_access_token(
                identity=account_id, expires_delta=self.access_ttl
            ),
            access_expired_at=now + self.access_ttl,
            refresh=self.tokens.create_refresh_token(
                identity=account_id, expires_delta=self.refresh_ttl
            ),
            refresh_expired_at=now + self.refresh_ttl,
        )
