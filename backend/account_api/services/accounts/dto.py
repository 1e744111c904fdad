"""
DTOs for AccountService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from account_api.core.clock import as_utc
from account_api.models.account import Account

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AccountCreateIn:
    """
    Input DTO for account registration.

    :param email: Login email (normalized to lowercase).
    :type email: str
    :param name: Display name.
    :type name: str
    :param password: Raw password; hashed by the service.
    :type password: str
    :param postal_code: ``NNN-NNNN`` postal code.
    :type postal_code: str
    :param prefecture_code: Referenced prefecture (1..47).
    :type prefecture_code: int
    :param address_details: Address after the prefecture.
    :type address_details: str
    :param fixed_number: Optional landline number.
    :type fixed_number: str | None
    :param mobile_number: Optional mobile number.
    :type mobile_number: str | None
    """

    email: str
    name: str
    password: str
    postal_code: str
    prefecture_code: int
    address_details: str
    fixed_number: str | None = None
    mobile_number: str | None = None


@dataclass(frozen=True, slots=True)
class AccountUpdateIn:
    """
    Input DTO for a partial profile update.

    ``None`` leaves a field unchanged. An empty string clears a phone number.

    :param email: Optional new email.
    :param name: Optional new display name.
    :param is_active: Optional activation flag; ``False`` revokes every session.
    :param fixed_number: Optional landline number.
    :param mobile_number: Optional mobile number.
    :param postal_code: Optional postal code.
    :param prefecture_code: Optional prefecture code.
    :param address_details: Optional address details.
    """

    email: str | None = None
    name: str | None = None
    is_active: bool | None = None
    fixed_number: str | None = None
    mobile_number: str | None = None
    postal_code: str | None = None
    prefecture_code: int | None = None
    address_details: str | None = None


@dataclass(frozen=True, slots=True)
class PasswordChangeIn:
    """
    Input DTO for changing an account password.

    :param account_id: Account identifier.
    :type account_id: str
    :param old_password: Current password.
    :type old_password: str
    :param new_password: New password (raw).
    :type new_password: str
    """

    account_id: str
    old_password: str
    new_password: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AccountOut:
    """
    Output DTO representing public-safe account data (never the hash).
    """

    id: str
    email: str
    name: str
    is_active: bool
    fixed_number: str | None
    mobile_number: str | None
    postal_code: str
    prefecture_code: int
    prefecture_name: str
    address_details: str
    logged_in_at: datetime | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, account: Account) -> AccountOut:
        return cls(
            id=account.id,
            email=account.email,
            name=account.name,
            is_active=account.is_active,
            fixed_number=account.fixed_number,
            mobile_number=account.mobile_number,
            postal_code=account.postal_code,
            prefecture_code=account.prefecture_code,
            prefecture_name=account.prefecture.name,
            address_details=account.address_details,
            logged_in_at=as_utc(account.logged_in_at) if account.logged_in_at else None,
            created_at=as_utc(account.created_at),
            updated_at=as_utc(account.updated_at),
        )
