from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

import numpy as np
import pandas as pd

from buzz_browser.core.filter_state import FilterState
from buzz_browser.core.models import Row
from buzz_browser.core.months import month_display_name, month_ordinal, month_ordinals

logger = logging.getLogger(__name__)

RowPredicate = Callable[[FilterState, Row], bool]


# -------------------------------------------------------------------------
# Per-dimension combinators
#
# Each one returns True when its dimension is empty (unconstrained).
# -------------------------------------------------------------------------

def match_category(state: FilterState, row: Row) -> bool:
    if not state.categories:
        return True
    return row.category in state.categories


def match_time(state: FilterState, row: Row) -> bool:
    tf = state.time_filter
    if tf.year is None or not tf.months:
        return True
    if row.year != tf.year:
        return False
    ordinal = month_ordinal(row.month)
    return ordinal is not None and ordinal in month_ordinals(tf.months)


def match_quadrant(state: FilterState, row: Row) -> bool:
    if not state.quadrants:
        return True
    return row.quadrant in state.quadrants


def match_keyword(state: FilterState, row: Row) -> bool:
    needle = state.keyword.strip().lower()
    if not needle:
        return True
    return needle in (row.keyword or "").lower()


DIMENSION_PREDICATES: List[RowPredicate] = [
    match_category,
    match_time,
    match_quadrant,
    match_keyword,
]


def matches(state: FilterState, row: Row) -> bool:
    """AND of every dimension predicate."""
    return all(pred(state, row) for pred in DIMENSION_PREDICATES)


def filter_rows(rows: Iterable[Row], state: FilterState) -> List[Row]:
    return [row for row in rows if matches(state, row)]


# -------------------------------------------------------------------------
# Vectorised variant over a DataFrame built from Row.to_dict()
# -------------------------------------------------------------------------

def frame_mask(df: pd.DataFrame, state: FilterState) -> np.ndarray:
    """
    Boolean mask with the same semantics as `matches`, evaluated column-wise.
    """
    mask = np.ones(len(df), dtype=bool)
    if df.empty:
        return mask

    if state.categories:
        mask &= df["category"].isin(state.categories).to_numpy()

    tf = state.time_filter
    if tf.year is not None and tf.months:
        wanted = month_ordinals(tf.months)
        row_ordinals = df["month"].map(month_ordinal)
        mask &= (df["year"] == tf.year).to_numpy()
        mask &= row_ordinals.isin(wanted).to_numpy()

    if state.quadrants:
        mask &= df["quadrant"].isin(state.quadrants).to_numpy()

    needle = state.keyword.strip().lower()
    if needle:
        keywords = df["keyword"].fillna("").astype(str).str.lower()
        mask &= keywords.str.contains(needle, regex=False).to_numpy()

    return mask


def filter_frame(df: pd.DataFrame, state: FilterState) -> pd.DataFrame:
    return df.loc[frame_mask(df, state)]


# -------------------------------------------------------------------------
# Derived labels
# -------------------------------------------------------------------------

def time_range_label(state: FilterState) -> Optional[str]:
    """
    "2024 1月" for one month, "2024 1月 - 3月" for several.

    Returns None when no year/months are selected or none of the month
    labels can be normalised, so callers can hide the range display.
    """
    tf = state.time_filter
    if tf.year is None or not tf.months:
        return None

    ordinals = month_ordinals(tf.months)
    if not ordinals:
        logger.debug("No recognisable month labels in %s", list(tf.months))
        return None

    first = month_display_name(ordinals[0])
    if len(ordinals) == 1:
        return f"{tf.year} {first}"
    return f"{tf.year} {first} - {month_display_name(ordinals[-1])}"
