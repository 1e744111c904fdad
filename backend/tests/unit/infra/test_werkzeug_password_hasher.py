"""Unit tests for :class:`WerkzeugPasswordHasher`."""

from __future__ import annotations

from account_api.infra.hashing.werkzeug_password_hasher import WerkzeugPasswordHasher
from tests.helpers.utils import not_raises

FAST = "pbkdf2:sha256:1000"


def test_hash_verifies():
    hasher = WerkzeugPasswordHasher(method=FAST)
    hashed = hasher.hash("Passw0rd!")
    assert hashed != "Passw0rd!"
    assert hasher.verify("Passw0rd!", hashed)
    assert not hasher.verify("passw0rd!", hashed)


def test_hashes_are_salted():
    hasher = WerkzeugPasswordHasher(method=FAST)
    assert hasher.hash("Passw0rd!") != hasher.hash("Passw0rd!")


def test_pepper_is_required_to_verify():
    peppered = WerkzeugPasswordHasher(method=FAST, pepper="server-secret")
    plain = WerkzeugPasswordHasher(method=FAST)
    hashed = peppered.hash("Passw0rd!")
    assert peppered.verify("Passw0rd!", hashed)
    assert not plain.verify("Passw0rd!", hashed)


def test_malformed_hash_does_not_verify():
    hasher = WerkzeugPasswordHasher(method=FAST)
    with not_raises(ValueError):
        assert not hasher.verify("Passw0rd!", "")
        assert not hasher.verify("Passw0rd!", "not-a-werkzeug-hash")
