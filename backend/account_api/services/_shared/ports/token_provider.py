from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Protocol
from uuid import uuid4

from account_api.services._shared.errors import UnauthorizedError

ACCESS = "access"
REFRESH = "refresh"


class TokenProvider(Protocol):
    """Port for encoding and verifying signed bearer tokens.

    ``decode`` verifies signature and expiry and raises
    :class:`UnauthorizedError` for anything it cannot trust.
    """

    def create_access_token(self, *, identity: str, expires_delta: timedelta) -> str: ...

    def create_refresh_token(self, *, identity: str, expires_delta: timedelta) -> str: ...

    def decode(self, token: str) -> dict[str, Any]: ...

    def get_subject(self, token: str) -> str: ...

    def get_token_type(self, token: str) -> str: ...


class StubTokenProvider(TokenProvider):
    """Deterministic, unsigned token provider used in unit tests."""

    def __init__(self) -> None:
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}

    def _mk(self, *, identity: str, ttype: str, exp_delta: timedelta) -> str:
        self._seq += 1
        jti = uuid4().hex
        token = f"{ttype}.{identity}.{jti}.{self._seq}"
        self._issued[token] = {
            "sub": identity,
            "type": ttype,
            "jti": jti,
            "exp": int((datetime.now(UTC) + exp_delta).timestamp()),
        }
        return token

    def create_access_token(self, *, identity: str, expires_delta: timedelta) -> str:
        return self._mk(identity=identity, ttype=ACCESS, exp_delta=expires_delta)

    def create_refresh_token(self, *, identity: str, expires_delta: timedelta) -> str:
        return self._mk(identity=identity, ttype=REFRESH, exp_delta=expires_delta)

    def decode(self, token: str) -> dict[str, Any]:
        try:
            return self._issued[token]
        except KeyError:
            raise UnauthorizedError("Malformed token") from None

    def get_subject(self, token: str) -> str:
        return str(self.decode(token)["sub"])

    def get_token_type(self, token: str) -> str:
        return str(self.decode(token)["type"])
