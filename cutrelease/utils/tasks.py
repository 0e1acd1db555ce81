"""Bounded concurrent fan-out with a shared cancellation token.

Used for artifact uploads, build targets, and multi-page release searches:
one task per unit of work, the first error cancels the siblings, and callers
never wait on tasks that were still running when the group was cancelled.
"""

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any

from cutrelease.exceptions import ReleaseTimeoutError

logger = logging.getLogger(__name__)


class TaskGroup:
    """Run callables concurrently with first-error cancellation.

    Tasks receive nothing implicitly; long-running tasks should poll
    ``group.cancelled`` between units of work. Tasks that have not started
    when the group is cancelled never run.

    Example:
        with TaskGroup(max_workers=4) as group:
            for item in items:
                group.go(upload, item)
            group.wait()
    """

    def __init__(self, max_workers: int = 8, name: str = "task") -> None:
        self.cancelled = threading.Event()
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix=f"cutrelease-{name}",
        )
        self._futures: list[Future[Any]] = []

    def __enter__(self) -> "TaskGroup":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        if exc is not None:
            self.cancel()
        self._executor.shutdown(wait=False, cancel_futures=True)

    def go(self, fn: Callable[..., Any], *args: Any) -> None:
        """Schedule fn(*args) in the group."""
        self._futures.append(self._executor.submit(self._guard, fn, *args))

    def _guard(self, fn: Callable[..., Any], *args: Any) -> Any:
        if self.cancelled.is_set():
            return None
        return fn(*args)

    def cancel(self) -> None:
        """Signal cancellation and drop tasks that have not started."""
        self.cancelled.set()
        for future in self._futures:
            future.cancel()

    def wait(self) -> None:
        """Wait until every task finished or the group was cancelled.

        Raises:
            Exception: The first error raised by a task. Errors raised by tasks
                after the group was cancelled are discarded.
        """
        pending = set(self._futures)
        while pending and not self.cancelled.is_set():
            done, pending = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                if future.cancelled():
                    continue
                error = future.exception()
                if error is not None and not self.cancelled.is_set():
                    logger.debug("Task failed, cancelling %d sibling(s): %s", len(pending), error)
                    self.cancel()
                    raise error
        self._executor.shutdown(wait=False, cancel_futures=True)


class Deadline:
    """A single deadline shared by every call of one release invocation."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        self._expires_at = time.monotonic() + seconds

    def remaining(self) -> float:
        return self._expires_at - time.monotonic()

    def timeout(self, step_timeout: float) -> float:
        """Return the timeout for one call, bounded by the deadline.

        Raises:
            ReleaseTimeoutError: If the deadline already expired
        """
        remaining = self.remaining()
        if remaining <= 0:
            raise ReleaseTimeoutError(
                f"Release deadline of {self.seconds:.0f}s expired",
                fix_hint="Re-run the command; completed steps are safe to repeat",
            )
        return min(step_timeout, remaining)


__all__ = ["Deadline", "TaskGroup"]
