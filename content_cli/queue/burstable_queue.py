"""Burstable, rate-limited in-process task queue.

Features:
- Concurrency limit (max tasks running at once)
- Minimum spacing between two task starts
- Token-bucket reservoir: an initial burst, then a sustained rate
- FIFO dispatch, per-task failure isolation
- Idle waiting for "all submitted work is finished"
"""

import asyncio
import inspect
import logging
import time
from collections import deque
from typing import Awaitable, Callable, Optional, TypeVar, Union

from content_cli.config import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

Task = Callable[[], Union[T, Awaitable[T]]]


class BurstableQueue:
    """Rate-limited task queue with an initial burst allowance.

    The reservoir starts at `burst_interval_cap` and is decremented for every
    dispatched task. Every `interval_ms` it grows by `sustained_interval_cap`,
    never beyond `burst_interval_cap`. Dispatch pauses while the reservoir is
    empty, while `concurrency` tasks are running, and until `min_time_ms` has
    passed since the previous start.
    """

    def __init__(
        self,
        concurrency: Optional[int] = None,
        min_time_ms: Optional[int] = None,
        burst_interval_cap: Optional[int] = None,
        sustained_interval_cap: Optional[int] = None,
        interval_ms: Optional[int] = None,
    ):
        settings = get_settings()
        self.concurrency = settings.queue_concurrency if concurrency is None else concurrency
        self.min_time_ms = settings.queue_min_time_ms if min_time_ms is None else min_time_ms
        self.burst_interval_cap = burst_interval_cap or settings.queue_burst_interval_cap
        self.sustained_interval_cap = sustained_interval_cap or settings.queue_sustained_interval_cap
        self.interval_ms = settings.queue_interval_ms if interval_ms is None else interval_ms

        if self.concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        if self.interval_ms <= 0:
            raise ValueError("interval_ms must be positive")

        self._queued: deque[tuple[Task, asyncio.Future]] = deque()
        self._running = 0
        self._reservoir = self.burst_interval_cap
        self._next_refill_at = time.monotonic() + self.interval_ms / 1000
        self._last_start: Optional[float] = None

        self._dispatcher: Optional[asyncio.Task] = None
        self._slot_freed = asyncio.Event()
        self._idle = asyncio.Event()
        self._idle.set()
        self._tasks: set[asyncio.Task] = set()

    # ==================== Introspection ====================

    def size(self) -> int:
        """Tasks not yet finished (queued + running)."""
        return len(self._queued) + self._running

    def pending(self) -> int:
        """Tasks queued but not yet started."""
        return len(self._queued)

    @property
    def reservoir(self) -> int:
        """Remaining dispatches before the next refill."""
        self._refill()
        return self._reservoir

    # ==================== Submission ====================

    def add(self, fn: Task) -> asyncio.Future:
        """
        Enqueue a zero-argument callable.

        The callable may return a plain value or an awaitable. Must be called
        from a running event loop; never blocks.

        Returns:
            Future resolved with the task's result, or failed with its exception
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        future.add_done_callback(self._log_failure)

        self._queued.append((fn, future))
        self._idle.clear()

        if self._dispatcher is None:
            self._dispatcher = loop.create_task(self._dispatch_loop())

        return future

    async def on_idle(self) -> None:
        """Wait until every queued and running task has finished.

        Tasks added while waiting, including ones added by code woken by a
        finishing task, are waited for too.
        """
        while self.size():
            await self._idle.wait()

    # ==================== Scheduling ====================

    def _refill(self) -> None:
        """Apply every reservoir refill tick that has elapsed."""
        now = time.monotonic()
        if now < self._next_refill_at:
            return

        interval = self.interval_ms / 1000
        ticks = int((now - self._next_refill_at) // interval) + 1
        cap = max(self.burst_interval_cap, self.sustained_interval_cap)
        self._reservoir = min(self._reservoir + ticks * self.sustained_interval_cap, cap)
        self._next_refill_at += ticks * interval
        logger.debug(f"Reservoir refilled to {self._reservoir}")

    async def _dispatch_loop(self) -> None:
        """Start queued tasks in FIFO order as the limits allow."""
        loop = asyncio.get_running_loop()

        while self._queued:
            if self._running >= self.concurrency:
                self._slot_freed.clear()
                await self._slot_freed.wait()
                continue

            self._refill()
            if self._reservoir <= 0:
                await asyncio.sleep(max(0.0, self._next_refill_at - time.monotonic()))
                continue

            if self._last_start is not None and self.min_time_ms > 0:
                wait = self._last_start + self.min_time_ms / 1000 - time.monotonic()
                if wait > 0:
                    await asyncio.sleep(wait)
                    continue

            fn, future = self._queued.popleft()
            if future.done():
                # Cancelled by the caller before it was started
                self._check_idle()
                continue

            self._reservoir -= 1
            self._running += 1
            self._last_start = time.monotonic()

            task = loop.create_task(self._execute(fn, future))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        self._dispatcher = None

    async def _execute(self, fn: Task, future: asyncio.Future) -> None:
        try:
            result = fn()
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            if not future.done():
                future.set_exception(e)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            self._running -= 1
            self._slot_freed.set()
            self._check_idle()

    def _check_idle(self) -> None:
        if self.size() == 0:
            self._idle.set()

    @staticmethod
    def _log_failure(future: asyncio.Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.warning(f"Queued task failed: {error!r}")
