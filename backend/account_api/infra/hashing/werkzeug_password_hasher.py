# account_api/infra/hashing/werkzeug_password_hasher.py
from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from account_api.services._shared.ports import PasswordHasher

DEFAULT_METHOD = "scrypt"


@dataclass(slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    Password hashing adapter over :mod:`werkzeug.security`.

    - ``scrypt`` (salted, memory-hard) unless another Werkzeug method is given.
    - Verification is constant-time (``hmac.compare_digest`` inside Werkzeug).
    - An optional server-side pepper is appended before hashing.

    :param method: Werkzeug method string, e.g. ``"scrypt"`` or ``"pbkdf2:sha256:600000"``.
    :param pepper: Secret appended to every plaintext; empty disables it.
    """

    method: str = DEFAULT_METHOD
    pepper: str = ""

    def _peppered(self, plaintext: str) -> str:
        return f"{plaintext}{self.pepper}" if self.pepper else plaintext

    def hash(self, plaintext: str) -> str:
        return generate_password_hash(self._peppered(plaintext), method=self.method)

    def verify(self, plaintext: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return check_password_hash(hashed, self._peppered(plaintext))
        except ValueError:
            # Unknown method or malformed hash string
            return False

