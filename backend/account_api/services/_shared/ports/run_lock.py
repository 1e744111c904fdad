from __future__ import annotations

import threading
from typing import Protocol


class RunLock(Protocol):
    """Port for a non-blocking, single-holder lock guarding a periodic job.

    ``acquire`` returns immediately: ``True`` when the caller now holds the
    lock, ``False`` when another run holds it.
    """

    def acquire(self) -> bool: ...

    def release(self) -> None: ...


class ThreadRunLock(RunLock):
    """In-process lock; enough when a single worker runs the job."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        self._lock.release()
