from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ScheduledTask:
    """Handle returned by Scheduler.schedule(); pass it back to cancel()."""

    due_ms: float
    callback: Callable[[], Any]
    cancelled: bool = False
    done: bool = False
    # Backend-specific handle (asyncio.TimerHandle for AsyncioScheduler)
    native: Any = field(default=None, repr=False)

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)


class Scheduler(ABC):
    """
    Abstract interface for delayed callbacks on a single cooperative loop.
    Delays are in milliseconds.
    """

    @abstractmethod
    def schedule(self, delay_ms: float, callback: Callable[[], Any]) -> ScheduledTask:
        pass

    @abstractmethod
    def cancel(self, task: Optional[ScheduledTask]) -> None:
        """Cancel a task. Cancelling None or an already finished task is a no-op."""
        pass


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler driven by a fake clock.

    Nothing runs until advance() moves the clock past a task's due time.
    Used by tests and by headless tooling that wants to drive time itself.
    """

    def __init__(self) -> None:
        self.now_ms: float = 0.0
        self._queue: List[tuple[float, int, ScheduledTask]] = []
        self._seq = itertools.count()

    def schedule(self, delay_ms: float, callback: Callable[[], Any]) -> ScheduledTask:
        task = ScheduledTask(due_ms=self.now_ms + max(delay_ms, 0), callback=callback)
        heapq.heappush(self._queue, (task.due_ms, next(self._seq), task))
        return task

    def cancel(self, task: Optional[ScheduledTask]) -> None:
        if task is not None and task.pending:
            task.cancelled = True

    def pending_count(self) -> int:
        return sum(1 for _, _, t in self._queue if t.pending)

    def advance(self, delta_ms: float) -> int:
        """
        Move the clock forward, running due callbacks in due-time order.
        Returns the number of callbacks executed.
        """
        target = self.now_ms + delta_ms
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            if not task.pending:
                continue
            self.now_ms = due
            task.done = True
            task.callback()
            ran += 1
        self.now_ms = target
        return ran


class AsyncioScheduler(Scheduler):
    """Runs callbacks on an asyncio event loop via loop.call_later()."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, delay_ms: float, callback: Callable[[], Any]) -> ScheduledTask:
        task = ScheduledTask(due_ms=self.loop.time() * 1000 + delay_ms, callback=callback)

        def _run() -> None:
            if not task.pending:
                return
            task.done = True
            callback()

        task.native = self.loop.call_later(max(delay_ms, 0) / 1000.0, _run)
        return task

    def cancel(self, task: Optional[ScheduledTask]) -> None:
        if task is None or not task.pending:
            return
        task.cancelled = True
        if task.native is not None:
            task.native.cancel()
