# account_api/services/tokens/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from account_api.core.clock import as_utc
from account_api.models.jwt_token import JwtToken


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO for an issued access/refresh pair.

    :param id: Token row identifier (ULID).
    :param account_id: Owning account.
    :param access: Signed access token.
    :param access_expired_at: End of the access window (UTC).
    :param refresh: Signed refresh token.
    :param refresh_expired_at: End of the refresh window (UTC).
    """

    id: str
    account_id: str
    access: str
    access_expired_at: datetime
    refresh: str
    refresh_expired_at: datetime

    @classmethod
    def from_row(cls, row: JwtToken) -> TokenPairOut:
        return cls(
            id=row.id,
            account_id=row.account_id,
            access=row.access,
            access_expired_at=as_utc(row.access_expired_at),
            refresh=row.refresh,
            refresh_expired_at=as_utc(row.refresh_expired_at),
        )
