"""Background scheduling of the expired-token sweep (APScheduler)."""

from __future__ import annotations

import atexit
import logging
import threading

from apscheduler.schedulers.background import BackgroundScheduler
from flask import Flask, current_app

from account_api.core.extensions import get_redis
from account_api.infra.redis.redis_run_lock import RedisRunLock
from account_api.services._shared.ports import RunLock, ThreadRunLock
from account_api.services.tokens.collector import JOB_NAME, TokenGarbageCollector

log = logging.getLogger(__name__)

SCHEDULER_KEY = "token_gc_scheduler"

# One in-process lock shared by the scheduler job and ``flask tokens sweep``.
_process_lock = ThreadRunLock()
_process_lock_guard = threading.Lock()


def build_collector() -> TokenGarbageCollector:
    """
    Build a collector for the current app.

    Always guarded by the process-wide lock; when Redis is configured a
    lease lock also keeps other worker processes out.
    """
    locks: list[RunLock] = [_process_lock]
    client = get_redis()
    if client is not None:
        locks.append(
            RedisRunLock(
                client,
                name=JOB_NAME,
                lease_seconds=int(current_app.config.get("TOKEN_GC_LOCK_SECONDS", 300)),
            )
        )
    return TokenGarbageCollector(locks=locks)


def init_app(app: Flask) -> BackgroundScheduler | None:
    """
    Start the periodic sweep unless ``TOKEN_GC_ENABLED`` is false.

    The job runs every ``TOKEN_GC_INTERVAL_MINUTES`` inside an app context;
    ``max_instances=1`` and ``coalesce=True`` keep late ticks from piling up.

    :returns: The running scheduler, or ``None`` when disabled.
    """
    if not app.config.get("TOKEN_GC_ENABLED", False):
        log.debug("Token sweep scheduler disabled")
        return None

    with _process_lock_guard:
        existing = app.extensions.get(SCHEDULER_KEY)
        if existing is not None:
            return existing

        minutes = int(app.config.get("TOKEN_GC_INTERVAL_MINUTES", 10))
        if minutes <= 0:
            raise ValueError("TOKEN_GC_INTERVAL_MINUTES must be positive")

        def _job() -> None:
            with app.app_context():
                build_collector().tick()

        scheduler = BackgroundScheduler(timezone="UTC", daemon=True)
        scheduler.add_job(
            _job,
            "interval",
            minutes=minutes,
            id=JOB_NAME,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        scheduler.start()
        app.extensions[SCHEDULER_KEY] = scheduler
        atexit.register(_shutdown, scheduler)
        log.info("Token sweep scheduled every %d minute(s)", minutes)
        return scheduler


def _shutdown(scheduler: BackgroundScheduler) -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
