"""Session lifecycle: login, authorize, refresh and logout."""

from .service import AuthService

__all__ = ["AuthService"]
