# account_api/services/accounts/service.py
from __future__ import annotations

import logging

from account_api.models.account import Account
from account_api.services._shared.base import (
    BaseService,
    ServiceContext,
    read_operation,
    write_operation,
)
from account_api.services._shared.errors import (
    InvalidCredentialsError,
    NotFoundError,
    ValidationFailedError,
)
from account_api.services._shared.ports import PasswordHasher
from account_api.services.accounts import rules
from account_api.services.accounts.dto import (
    AccountCreateIn,
    AccountOut,
    AccountUpdateIn,
    PasswordChangeIn,
)

log = logging.getLogger(__name__)


class AccountService(BaseService):
    """
    Application service for account registration and profile management.

    Responsibilities
    ----------------
    * Validate input with :mod:`account_api.services.accounts.rules`.
    * Hash passwords through the injected :class:`PasswordHasher`.
    * Keep sessions consistent with the account: deactivating an account
      revokes every token pair it owns.
    """

    def __init__(self, *, password_hasher: PasswordHasher, ctx: ServiceContext | None = None) -> None:
        super().__init__(ctx=ctx)
        self.hasher = password_hasher

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    @write_operation
    def register(self, dto: AccountCreateIn) -> AccountOut:
        """
        Register a new, active account.

        :param dto: Registration input.
        :type dto: AccountCreateIn
        :returns: Created account.
        :rtype: AccountOut
        :raises ValidationFailedError: When a field breaks its rule.
        :raises NotFoundError: When the prefecture code is unknown.
        :raises ConflictError: When the email is already registered.
        """
        values = rules.validate_create(dto)
        password_hash = self.hasher.hash(dto.password)

        with self.rw_uow() as uow:
            if uow.prefectures.get_by_code(values["prefecture_code"]) is None:
                raise NotFoundError("Prefecture", values["prefecture_code"])
            account = Account(**values, password_hash=password_hash, is_active=True)
            uow.accounts.create(account)
            out = AccountOut.from_model(account)

        log.info("Account registered", extra={"account_id": out.id})
        return out

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    @read_operation
    def get(self, account_id: str) -> AccountOut:
        """
        Fetch one account.

        :raises NotFoundError: When no account has ``account_id``.
        """
        with self.ro_uow() as uow:
            account = uow.accounts.find_by_id(account_id)
            if account is None:
                raise NotFoundError("Account", account_id)
            return AccountOut.from_model(account)

    @read_operation
    def list(self, *, sort: list[str] | None = None) -> list[AccountOut]:
        """Return every account, oldest first by default."""
        with self.ro_uow() as uow:
            return [AccountOut.from_model(a) for a in uow.accounts.list_accounts(sort=sort)]

    # --------------------------------------------------------------------- #
    # Updates
    # --------------------------------------------------------------------- #

    @write_operation
    def update(self, account_id: str, dto: AccountUpdateIn) -> AccountOut:
        """
        Apply a partial profile update.

        :param account_id: Account identifier.
        :param dto: Fields to change (``None`` = unchanged).
        :returns: Updated account.
        :raises NotFoundError: When the account or the new prefecture is unknown.
        :raises ConflictError: When the new email belongs to another account.
        :raises ValidationFailedError: When a field breaks its rule.
        """
        with self.rw_uow() as uow:
            account = uow.accounts.find_by_id(account_id)
            if account is None:
                raise NotFoundError("Account", account_id)

            updates = rules.validate_update(
                dto,
                current_fixed=account.fixed_number,
                current_mobile=account.mobile_number,
            )
            code = updates.get("prefecture_code")
            if code is not None and uow.prefectures.get_by_code(code) is None:
                raise NotFoundError("Prefecture", code)

            account = uow.accounts.update(account_id, updates)

            revoked = 0
            if updates.get("is_active") is False:
                revoked = uow.tokens.delete_by_account_id(account_id)
            out = AccountOut.from_model(account)

        if revoked:
            log.info("Account deactivated", extra={"account_id": account_id, "removed": revoked})
        return out

    @write_operation
    def change_password(self, dto: PasswordChangeIn) -> None:
        """
        Change a password after verifying the current one.

        :raises ValidationFailedError: When the new password is too weak.
        :raises NotFoundError: When the account does not exist.
        :raises InvalidCredentialsError: When the old password is wrong.
        """
        problems = rules.check_password(dto.new_password)
        if problems:
            raise ValidationFailedError({"new_password": problems})

        with self.rw_uow() as uow:
            account = uow.accounts.find_by_id(dto.account_id)
            if account is None:
                raise NotFoundError("Account", dto.account_id)
            if not self.hasher.verify(dto.old_password, account.password_hash):
                raise InvalidCredentialsError()
            uow.accounts.change_password(dto.account_id, self.hasher.hash(dto.new_password))

        log.info("Password changed", extra={"account_id": dto.account_id})

    # --------------------------------------------------------------------- #
    # Deletion
    # --------------------------------------------------------------------- #

    @write_operation
    def delete(self, account_id: str, *, cascade: bool = False) -> None:
        """
        Hard-delete an account.

        :param cascade: Also delete live sessions; without it an account that
            still has an open refresh window is kept.
        :raises NotFoundError: When the account does not exist.
        :raises ConflictError: When live sessions exist and ``cascade`` is false.
        """
        with self.rw_uow() as uow:
            uow.accounts.delete(account_id, cascade=cascade)
        log.info("Account deleted", extra={"account_id": account_id})
