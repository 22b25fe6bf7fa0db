"""Cancellable periodic tasks for dashboard refreshes."""

import logging
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Runs ``fn`` every ``interval`` seconds on a daemon thread until cancelled.

    The first run happens one interval after start. Failures are logged and the
    schedule continues unchanged (no backoff).
    """

    def __init__(self, name: str, interval: float, fn: Callable[[], object]):
        self.name = name
        self.interval = interval
        self.fn = fn
        self.runs = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, name=f"refresh-{self.name}", daemon=True
        )
        self._thread.start()
        logger.info("Started %s refresh every %ss", self.name, self.interval)

    def cancel(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def _loop(self) -> None:
        next_run = time.monotonic() + self.interval
        while not self._stop.wait(max(0.0, next_run - time.monotonic())):
            self.runs += 1
            try:
                self.fn()
            except Exception:
                logger.exception("%s refresh #%d failed", self.name, self.runs)
            next_run += self.interval


class RefreshScheduler:
    """A group of periodic tasks started and cancelled together."""

    def __init__(self) -> None:
        self._tasks: dict[str, PeriodicTask] = {}

    @property
    def tasks(self) -> dict[str, PeriodicTask]:
        return dict(self._tasks)

    @property
    def running(self) -> bool:
        return any(t.running for t in self._tasks.values())

    def add(self, name: str, interval: float, fn: Callable[[], object]) -> PeriodicTask:
        if name in self._tasks:
            raise ValueError(f"Task already scheduled: {name}")
        task = PeriodicTask(name, interval, fn)
        self._tasks[name] = task
        return task

    def start(self) -> None:
        for task in self._tasks.values():
            task.start()

    def stop(self) -> None:
        for task in self._tasks.values():
            task.cancel()
        logger.info("Stopped %d refresh tasks", len(self._tasks))
