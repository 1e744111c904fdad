# account_api/services/_shared/base.py
from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, TypeVar

from flask import current_app, has_app_context
from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from account_api.core import errors as api_errors
from account_api.services._shared.errors import (
    ConflictError,
    InactiveAccountError,
    InvalidCredentialsError,
    NotFoundError,
    ServiceError,
    StoreUnavailableError,
    TokenExpiredError,
    UnauthorizedError,
    ValidationFailedError,
)
from account_api.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

log = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

#: Driver/pool failures that mean "the store did not answer in time".
STORE_FAILURES: tuple[type[BaseException], ...] = (OperationalError, PoolTimeoutError)

DEFAULT_READ_ATTEMPTS = 3


@contextmanager
def store_errors() -> Iterator[None]:
    """Re-raise store timeouts and connectivity failures as :class:`StoreUnavailableError`."""
    try:
        yield
    except STORE_FAILURES as exc:
        raise StoreUnavailableError(f"Store unavailable: {exc.__class__.__name__}") from exc


def _read_attempts() -> int:
    if has_app_context():
        return int(current_app.config.get("STORE_RETRY_ATTEMPTS", DEFAULT_READ_ATTEMPTS))
    return DEFAULT_READ_ATTEMPTS


def read_operation(func: F) -> F:
    """
    Mark a service method as a read: store failures are retried with backoff.

    Strategy:
    - Wait: exponential backoff (50ms, 100ms, ...) capped at 1s.
    - Stop: after ``STORE_RETRY_ATTEMPTS`` attempts, then re-raise
      :class:`StoreUnavailableError`.
    - Every other error propagates immediately.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        retrying = Retrying(
            stop=stop_after_attempt(_read_attempts()),
            wait=wait_exponential(multiplier=0.05, max=1),
            retry=retry_if_exception_type(StoreUnavailableError),
            before_sleep=before_sleep_log(log, logging.WARNING),
            reraise=True,
        )
        for attempt in retrying:
            with attempt, store_errors():
                return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def write_operation(func: F) -> F:
    """Mark a service method as a write: store failures surface once, unretried."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        with store_errors():
            return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (auth, request ids, etc.).

    :param actor_id: Authenticated account identifier.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: str | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    Services never touch the global session; every operation runs inside a
    Unit of Work whose session is handed to the repositories.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context (auth, tracing).
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level.
        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, NotFoundError):
            # → 404 Not Found
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            # → 409 Conflict
            return api_errors.Conflict(str(exc))

        if isinstance(exc, InvalidCredentialsError):
            # → 401, same body for unknown email and wrong password
            return api_errors.Unauthorized(str(exc), code="invalid_credentials")

        if isinstance(exc, InactiveAccountError):
            # → 403 Forbidden
            return api_errors.Forbidden(str(exc), code="account_inactive")

        if isinstance(exc, TokenExpiredError):
            # → 401 with a distinct code so clients re-login instead of retrying
            return api_errors.Unauthorized(str(exc), code="token_expired")

        if isinstance(exc, UnauthorizedError):
            # → 401 Unauthorized
            return api_errors.Unauthorized(str(exc))

        if isinstance(exc, ValidationFailedError):
            # → 422 Unprocessable Entity
            return api_errors.UnprocessableEntity(str(exc), details={"errors": exc.errors})

        if isinstance(exc, StoreUnavailableError):
            # → 503 Service Unavailable
            return api_errors.ServiceUnavailable()

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
