from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import pandas as pd

from buzz_browser.core.filter_state import FilterState
from buzz_browser.core.models import Category, Row, SheetInfo
from buzz_browser.core.months import month_ordinal
from buzz_browser.core.predicates import filter_frame, filter_rows

logger = logging.getLogger(__name__)

ROW_COLUMNS = [
    "year", "month", "category", "keyword",
    "xhs_buzz", "douyin_buzz", "ttl_buzz", "ttl_buzz_yoy", "ttl_buzz_mom",
    "xhs_search", "xhs_search_vs_dec", "douyin_search", "douyin_search_vs_dec",
    "quadrant", "subcategory",
]


class DatasetContainer:
    """
    Holds the ingested rows plus the category and sheet metadata derived
    from the same ingestion.

    The dataset only changes by whole replacement (`replace` / `clear`),
    so readers never see a half-updated mix of old and new rows.
    """

    def __init__(self) -> None:
        self._rows: tuple[Row, ...] = ()
        self._categories: tuple[Category, ...] = ()
        self._sheet_infos: tuple[SheetInfo, ...] = ()

        # Lazily built pandas view of the rows, dropped on every replace
        self._frame: Optional[pd.DataFrame] = None

    # -------------------------------------------------------------------------
    # Replacement
    # -------------------------------------------------------------------------
    def replace(
        self,
        rows: Sequence[Row],
        categories: Sequence[Category],
        sheet_infos: Sequence[SheetInfo],
    ) -> None:
        self._rows = tuple(rows)
        self._categories = tuple(categories)
        self._sheet_infos = tuple(sheet_infos)
        self._frame = None
        logger.info(
            "Dataset replaced: %d rows, %d categories, %d sheets",
            len(self._rows), len(self._categories), len(self._sheet_infos),
        )

    def clear(self) -> None:
        self.replace([], [], [])

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------
    @property
    def rows(self) -> tuple[Row, ...]:
        return self._rows

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._categories

    @property
    def sheet_infos(self) -> tuple[SheetInfo, ...]:
        return self._sheet_infos

    def is_empty(self) -> bool:
        return not self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def frame(self) -> pd.DataFrame:
        """Rows as a DataFrame (one column per Row field). Cached until replaced."""
        if self._frame is None:
            self._frame = pd.DataFrame(
                [r.to_dict() for r in self._rows],
                columns=ROW_COLUMNS,
            )
        return self._frame

    def filtered_rows(self, state: FilterState) -> List[Row]:
        return filter_rows(self._rows, state)

    def filtered_frame(self, state: FilterState) -> pd.DataFrame:
        return filter_frame(self.frame(), state)

    # -------------------------------------------------------------------------
    # Available values for filter widgets
    # -------------------------------------------------------------------------
    def available_years(self) -> List[int]:
        return sorted({r.year for r in self._rows if r.year})

    def available_categories(self) -> List[str]:
        return sorted({r.category for r in self._rows if r.category})

    def available_quadrants(self) -> List[str]:
        return sorted({r.quadrant for r in self._rows if r.quadrant})

    def months_for_year(self, year: int) -> List[str]:
        """Month labels present for `year`, in calendar order."""
        labels = {r.month for r in self._rows if r.year == year and r.month}
        return sorted(labels, key=lambda m: month_ordinal(m) or 0)

    def available_months(self) -> List[str]:
        """'YYYY-<month label>' keys present in the data, oldest first."""
        pairs = {(r.year, r.month) for r in self._rows if r.year and r.month}
        ordered = sorted(pairs, key=lambda p: (p[0], month_ordinal(p[1]) or 0))
        return [f"{year}-{month}" for year, month in ordered]
