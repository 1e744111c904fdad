# account_api/infra/redis/redis_run_lock.py
from __future__ import annotations

import logging
import secrets

import redis  # type: ignore[import-untyped]
from redis.exceptions import WatchError  # type: ignore[import-untyped]

from account_api.services._shared.ports import RunLock

log = logging.getLogger(__name__)


class RedisRunLock(RunLock):
    """
    Cross-process lease lock backed by a single Redis key.

    - ``acquire`` is ``SET key token NX PX lease``: one holder at a time, and
      a crashed holder frees the lock once its lease runs out.
    - ``release`` deletes the key only while it still holds *our* token
      (WATCH/MULTI compare-and-delete), so an expired lease taken over by
      another worker is never released by mistake.

    Keys:
      ``{prefix}:{name}`` → random holder token
    """

    def __init__(
        self,
        client: redis.Redis,
        *,
        name: str,
        lease_seconds: int = 300,
        prefix: str = "lock",
    ) -> None:
        if lease_seconds <= 0:
            raise ValueError("lease_seconds must be positive")
        self.r = client
        self.key = f"{prefix}:{name}"
        self.lease_ms = int(lease_seconds * 1000)
        self._token: str | None = None

    def acquire(self) -> bool:
        token = secrets.token_hex(16)
        if self.r.set(self.key, token, nx=True, px=self.lease_ms):
            self._token = token
            return True
        return False

    def release(self) -> None:
        token = self._token
        if token is None:
            return
        self._token = None
        with self.r.pipeline() as p:
            try:
                p.watch(self.key)
                current = p.get(self.key)
                if current is None or _decode(current) != token:
                    p.unwatch()
                    log.warning("Run lock %s expired before release", self.key)
                    return
                p.multi()
                p.delete(self.key)
                p.execute()
            except WatchError:
                # Lease expired and was taken over between WATCH and EXEC
                log.warning("Run lock %s changed hands during release", self.key)


def _decode(value: bytes | str) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value
