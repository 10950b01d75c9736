from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from buzz_browser.config import Settings
from buzz_browser.core.scheduler import AsyncioScheduler, Scheduler
from buzz_browser.core.staging import StagingController
from buzz_browser.core.store import DataStore
from buzz_browser.services.persistence import PersistenceAdapter
from buzz_browser.services.storage import LocalFileSystemStorage, StorageBackend

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """
    Holds the shared state for one session: the store, the staging
    controller that debounces draft edits, and the persistence adapter.
    This is passed to UI/report code instead of using module-level globals.
    """
    settings: Settings
    store: DataStore
    staging: StagingController
    persistence: PersistenceAdapter
    _detach_persistence: Optional[Callable[[], None]] = None

    def close(self) -> None:
        """Session teardown: cancel any scheduled commit and stop persisting."""
        self.staging.close()
        if self._detach_persistence is not None:
            self._detach_persistence()
            self._detach_persistence = None


def create_app_context(
    settings: Optional[Settings] = None,
    *,
    scheduler: Optional[Scheduler] = None,
    storage: Optional[StorageBackend] = None,
) -> AppContext:
    """
    Startup sequence:
        1) restore the persisted snapshot (or defaults) into a fresh store
        2) start saving on every committed change
        3) start debouncing draft edits

    Restoring first keeps the restore itself from being re-saved or staged.
    """
    settings = settings or Settings()
    storage = storage if storage is not None else LocalFileSystemStorage(settings.storage_root)
    scheduler = scheduler if scheduler is not None else AsyncioScheduler()

    store = DataStore()
    persistence = PersistenceAdapter(storage, key=settings.storage_key)
    restored = persistence.restore_into(store)
    logger.info("Session started (restored=%s, rows=%d)", restored, len(store.rows))

    detach = persistence.attach(store)
    staging = StagingController(store, scheduler, delay_ms=settings.debounce_ms)

    return AppContext(
        settings=settings,
        store=store,
        staging=staging,
        persistence=persistence,
        _detach_persistence=detach,
    )
