"""Account use cases: registration, profile management and password changes."""

from .service import AccountService

__all__ = ["AccountService"]
