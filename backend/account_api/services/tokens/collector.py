# account_api/services/tokens/collector.py
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from contextlib import ExitStack
from datetime import datetime

from account_api.core.clock import utcnow
from account_api.services._shared.base import BaseService, write_operation
from account_api.services._shared.ports import RunLock

log = logging.getLogger(__name__)

JOB_NAME = "token_gc"


class TokenGarbageCollector(BaseService):
    """
    Periodic sweep of token pairs whose refresh window has closed.

    Single-flight: every lock in ``locks`` is taken without blocking before
    the sweep starts; if any is held elsewhere the tick is skipped, not
    queued.

    :param locks: Run locks guarding the sweep (in-process, cross-process).
    :param clock: Source of "now" (UTC, aware).
    """

    def __init__(
        self,
        *,
        locks: Sequence[RunLock],
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        super().__init__()
        if not locks:
            raise ValueError("at least one run lock is required")
        self.locks = tuple(locks)
        self.clock = clock

    def run_once(self) -> int | None:
        """
        Sweep once if no other sweep is running.

        :returns: Number of rows removed, or ``None`` when the tick was skipped.
        :raises StoreUnavailableError: If the store could not be reached.
        """
        with ExitStack() as held:
            for lock in self.locks:
                if not lock.acquire():
                    log.info("Token sweep skipped: already running", extra={"job": JOB_NAME})
                    return None
                held.callback(lock.release)
            return self._sweep()

    def tick(self) -> int | None:
        """
        Scheduler entry point: like :meth:`run_once` but never raises.

        Failures are logged; the next tick tries again.
        """
        try:
            return self.run_once()
        except Exception:
            log.exception("Token sweep failed", extra={"job": JOB_NAME, "status": "failed"})
            return None

    @write_operation
    def _sweep(self) -> int:
        with self.rw_uow() as uow:
            removed = uow.tokens.delete_expired_before(self.clock())
        log.info("Expired tokens swept", extra={"job": JOB_NAME, "removed": removed})
        return removed
