from __future__ import annotations

import hashlib
import hmac
from typing import Protocol


class PasswordHasher(Protocol):
    """Port for one-way password hashing and constant-time verification."""

    def hash(self, plaintext: str) -> str: ...

    def verify(self, plaintext: str, hashed: str) -> bool: ...


class StubPasswordHasher(PasswordHasher):
    """Fast, deterministic hasher used in unit tests. Never use in production."""

    PREFIX = "stub$"

    def hash(self, plaintext: str) -> str:
        return self.PREFIX + hashlib.sha256(plaintext.encode("utf-8")).hexdigest()

    def verify(self, plaintext: str, hashed: str) -> bool:
        return hmac.compare_digest(self.hash(plaintext), hashed)
