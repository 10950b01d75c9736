from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from buzz_browser.core.dataset import DatasetContainer
from buzz_browser.core.filter_state import DEFAULT_FILTERS, FilterState
from buzz_browser.core.models import Category, Row, SheetInfo
from buzz_browser.core.predicates import time_range_label

logger = logging.getLogger(__name__)

Listener = Callable[["DataStore"], None]

PENDING_CHANGED = "pending"
COMMITTED_CHANGED = "committed"


@dataclass(frozen=True)
class StoreSnapshot:
    """
    The persistable part of the store. The pending draft is deliberately
    not part of it.
    """

    rows: tuple = ()
    categories: tuple = ()
    sheet_infos: tuple = ()
    filters: FilterState = field(default_factory=FilterState)


class DataStore:
    """
    Two-phase filter state on top of a DatasetContainer.

    - `filters` is the committed filter; every view reads only this.
    - `pending_filters` is the in-flight draft (None when nothing is staged).

    Writers:
        set_filters          -> committed (bypasses the draft)
        set_pending_filters  -> draft
        apply_filters        -> draft promoted to committed (StagingController)
        clear_filters        -> committed reset, draft discarded

    Listeners subscribed to PENDING_CHANGED / COMMITTED_CHANGED are called
    synchronously after the corresponding write.
    """

    def __init__(self, dataset: Optional[DatasetContainer] = None) -> None:
        self.dataset = dataset if dataset is not None else DatasetContainer()
        self._filters: FilterState = DEFAULT_FILTERS
        self._pending: Optional[FilterState] = None
        self._listeners: Dict[str, List[Listener]] = {
            PENDING_CHANGED: [],
            COMMITTED_CHANGED: [],
        }

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------
    def subscribe(self, event: str, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        if event not in self._listeners:
            raise ValueError(f"Unknown store event: {event}")
        self._listeners[event].append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

        return _unsubscribe

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners[event]):
            listener(self)

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------
    @property
    def filters(self) -> FilterState:
        return self._filters

    @property
    def pending_filters(self) -> Optional[FilterState]:
        return self._pending

    def effective_filters(self) -> FilterState:
        """Draft if one is staged, otherwise committed. For echoing widget state only."""
        return self._pending if self._pending is not None else self._filters

    @property
    def rows(self) -> tuple[Row, ...]:
        return self.dataset.rows

    @property
    def categories(self) -> tuple[Category, ...]:
        return self.dataset.categories

    @property
    def sheet_infos(self) -> tuple[SheetInfo, ...]:
        return self.dataset.sheet_infos

    def filtered_rows(self) -> List[Row]:
        return self.dataset.filtered_rows(self._filters)

    def time_range_label(self) -> Optional[str]:
        if self.dataset.is_empty():
            return None
        return time_range_label(self._filters)

    # -------------------------------------------------------------------------
    # Dataset writers
    # -------------------------------------------------------------------------
    def set_raw_data(
        self,
        rows: Sequence[Row],
        categories: Sequence[Category],
        sheet_infos: Sequence[SheetInfo],
    ) -> None:
        self.dataset.replace(rows, categories, sheet_infos)
        self._notify(COMMITTED_CHANGED)

    def clear_all_data(self) -> None:
        self.dataset.clear()
        self._filters = DEFAULT_FILTERS
        self._pending = None
        logger.info("All data and filters cleared")
        self._notify(COMMITTED_CHANGED)

    # -------------------------------------------------------------------------
    # Filter writers
    # -------------------------------------------------------------------------
    def set_filters(self, **partial: Any) -> None:
        self._filters = self._filters.merged(**partial)
        logger.debug("Filters set directly: %s", sorted(partial))
        self._notify(COMMITTED_CHANGED)

    def set_pending_filters(self, **partial: Any) -> None:
        base = self._pending if self._pending is not None else self._filters
        self._pending = base.merged(**partial)
        self._notify(PENDING_CHANGED)

    def apply_filters(self) -> bool:
        """
        Promote the draft. Returns False (and does nothing) if no draft exists.
        """
        if self._pending is None:
            return False
        self._filters = self._pending
        self._pending = None
        logger.debug("Pending filters applied")
        self._notify(COMMITTED_CHANGED)
        return True

    def clear_filters(self) -> None:
        self._filters = DEFAULT_FILTERS
        self._pending = None
        self._notify(COMMITTED_CHANGED)

    # -------------------------------------------------------------------------
    # Persistence hooks
    # -------------------------------------------------------------------------
    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            rows=self.dataset.rows,
            categories=self.dataset.categories,
            sheet_infos=self.dataset.sheet_infos,
            filters=self._filters,
        )

    def restore(self, snapshot: StoreSnapshot) -> None:
        """
        Load a persisted snapshot as committed state.

        No listeners are notified: restored filters are already committed,
        so neither the staging controller nor persistence should react.
        """
        self.dataset.replace(snapshot.rows, snapshot.categories, snapshot.sheet_infos)
        self._filters = snapshot.filters
        self._pending = None
