"""
account_api.services._shared.ports
==================================

Collection of *ports* (hexagonal interfaces) the services depend on.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider`: signing and verification of bearer tokens.
- :mod:`password_hasher`:
    :class:`~.PasswordHasher`: one-way password hashing.
- :mod:`run_lock`:
    :class:`~.RunLock`: single-flight guard for periodic jobs.

Concrete adapters (Flask-JWT-Extended, Werkzeug, Redis) live under
``account_api.infra``.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher, StubPasswordHasher
from .run_lock import RunLock, ThreadRunLock
from .token_provider import ACCESS, REFRESH, StubTokenProvider, TokenProvider

__all__ = [
    "ACCESS",
    "REFRESH",
    "PasswordHasher",
    "StubPasswordHasher",
    "RunLock",
    "ThreadRunLock",
    "StubTokenProvider",
    "TokenProvider",
]
