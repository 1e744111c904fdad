"""Token issuance, rotation, revocation and expiry sweeping."""

from .collector import TokenGarbageCollector
from .dto import TokenPairOut
from .issuer import TokenIssuer

__all__ = ["TokenGarbageCollector", "TokenIssuer", "TokenPairOut"]
