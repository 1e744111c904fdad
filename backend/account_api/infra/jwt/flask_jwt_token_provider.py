# account_api/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, cast

from flask_jwt_extended import create_access_token as _create_access
from flask_jwt_extended import create_refresh_token as _create_refresh
from flask_jwt_extended import decode_token as _decode
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import ExpiredSignatureError, PyJWTError

from account_api.services._shared.errors import UnauthorizedError
from account_api.services._shared.ports import TokenProvider


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    Tokens carry ``sub`` (account id), ``exp``, ``jti`` and ``type``; the
    library generates a fresh ``jti`` per token, so two pairs issued in the
    same second still differ.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def create_access_token(self, *, identity: str, expires_delta: timedelta) -> str:
        return cast(str, _create_access(identity=identity, expires_delta=expires_delta, fresh=True))

    def create_refresh_token(self, *, identity: str, expires_delta: timedelta) -> str:
        return cast(str, _create_refresh(identity=identity, expires_delta=expires_delta))

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify signature and expiry and return the claims.

        :raises UnauthorizedError: For expired, tampered or malformed tokens.
        """
        try:
            return cast(dict[str, Any], _decode(token))
        except ExpiredSignatureError as exc:
            raise UnauthorizedError("Token has expired") from exc
        except (PyJWTError, JWTExtendedException) as exc:
            raise UnauthorizedError("Malformed or tampered token") from exc

    def get_subject(self, token: str) -> str:
        return str(self.decode(token)["sub"])

    def get_token_type(self, token: str) -> str:
        # Flask-JWT-Extended sets "type": "access" | "refresh"
        return cast(str, self.decode(token)["type"])
