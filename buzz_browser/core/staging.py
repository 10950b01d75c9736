from __future__ import annotations

import logging
from typing import Callable, Optional

from buzz_browser.core.scheduler import ScheduledTask, Scheduler
from buzz_browser.core.store import PENDING_CHANGED, DataStore

logger = logging.getLogger(__name__)

DEBOUNCE_DELAY_MS = 300


class StagingController:
    """
    Debounces draft edits into a single commit.

    Every PENDING_CHANGED event cancels the outstanding commit (if any) and
    schedules a fresh one `delay_ms` later, so a burst of edits commits once,
    timed from the last edit. close() cancels whatever is still scheduled.
    """

    def __init__(
        self,
        store: DataStore,
        scheduler: Scheduler,
        delay_ms: float = DEBOUNCE_DELAY_MS,
    ) -> None:
        self.store = store
        self.scheduler = scheduler
        self.delay_ms = delay_ms
        self._task: Optional[ScheduledTask] = None
        self._closed = False
        self._unsubscribe: Optional[Callable[[], None]] = store.subscribe(
            PENDING_CHANGED, self._on_pending_changed
        )

    @property
    def has_scheduled_commit(self) -> bool:
        return self._task is not None and self._task.pending

    def _on_pending_changed(self, store: DataStore) -> None:
        if self._closed or store.pending_filters is None:
            return
        self.scheduler.cancel(self._task)
        self._task = self.scheduler.schedule(self.delay_ms, self._commit)

    def _commit(self) -> None:
        self._task = None
        if self._closed:
            return
        if self.store.apply_filters():
            logger.info("Committed staged filters after %sms quiescence", self.delay_ms)

    def flush(self) -> bool:
        """Commit a staged draft immediately instead of waiting out the window."""
        self.scheduler.cancel(self._task)
        self._task = None
        return self.store.apply_filters()

    def close(self) -> None:
        """Tear down: cancel any scheduled commit and stop observing the store."""
        if self._closed:
            return
        self._closed = True
        self.scheduler.cancel(self._task)
        self._task = None
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self) -> StagingController:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
