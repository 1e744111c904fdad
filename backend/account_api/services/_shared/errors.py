"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never depend on Flask or
HTTP. They are the stable contract between repositories, ports and
application services.

The translation to HTTP responses (RFC 7807) is handled by
``account_api/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        Constraint/index name (PostgreSQL) or ``table.column`` (SQLite) to
        look for in the driver message.

    Returns
    -------
    bool
        True if the IntegrityError mentions the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    - The API layer translates them to ``APIError`` through ``BaseService``.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Account").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or referential rule conflict occurs.

    :param entity: Entity name (e.g., "Account").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class InvalidCredentialsError(ServiceError):
    """
    Raised when an email/password pair does not authenticate.

    The message is identical for an unknown email and a wrong password.
    """

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class InactiveAccountError(ServiceError):
    """Raised when valid credentials belong to a deactivated account."""

    def __init__(self) -> None:
        super().__init__("Account is inactive")


class UnauthorizedError(ServiceError):
    """Raised for a missing, malformed, revoked or expired access token."""

    def __init__(self, message: str = "Invalid or expired access token") -> None:
        super().__init__(message)


class TokenExpiredError(ServiceError):
    """Raised when a refresh token is presented after its window closed."""

    def __init__(self, message: str = "Refresh token has expired") -> None:
        super().__init__(message)


class StoreUnavailableError(ServiceError):
    """Raised when the store times out or cannot be reached; retryable."""

    def __init__(self, message: str = "Store unavailable") -> None:
        super().__init__(message)


@dataclass(slots=True)
class ValidationFailedError(ServiceError):
    """
    Raised for malformed input that passed transport-level parsing.

    :param errors: Field name → list of messages.
    :type errors: dict[str, list[str]]
    """

    errors: dict[str, list[str]] = field(default_factory=dict)

    def __str__(self) -> str:
        fields = ", ".join(sorted(self.errors)) or "input"
        return f"Validation failed: {fields}"
