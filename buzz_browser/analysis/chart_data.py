from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import pandas as pd

from buzz_browser.core.filter_state import FilterState
from buzz_browser.core.models import ChartDataPoint, Row
from buzz_browser.core.months import month_ordinal
from buzz_browser.core.predicates import filter_rows

logger = logging.getLogger(__name__)

UNKNOWN_QUADRANT = "未知"
SORT_KEYS = ("buzz", "yoy", "search")


def _num(value: Optional[float]) -> float:
    """Metric as float; missing or NaN values count as 0."""
    if value is None:
        return 0.0
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value):
        return 0.0
    return value


def normalize_percent_value(value: Optional[float]) -> float:
    """Ratio -> percent (0.98 -> 98.0). Missing or NaN values count as 0."""
    return _num(value) * 100


def _search_total(row: Row) -> float:
    return _num(row.xhs_search) + _num(row.douyin_search)


def to_chart_point(row: Row) -> ChartDataPoint:
    return ChartDataPoint(
        keyword=row.keyword,
        buzz=_num(row.ttl_buzz),
        yoy=normalize_percent_value(row.ttl_buzz_yoy),
        search=_search_total(row),
        quadrant=row.quadrant or UNKNOWN_QUADRANT,
        category=row.category,
    )


def chart_points(rows: Iterable[Row]) -> List[ChartDataPoint]:
    """One point per row, in input order."""
    return [to_chart_point(r) for r in rows]


def latest_per_keyword(rows: Iterable[Row]) -> List[Row]:
    """
    Keep the most recent row per keyword (by year, then month ordinal).
    Ties keep the first row seen. Result is in first-seen keyword order.
    """
    latest: Dict[str, Row] = {}
    for row in rows:
        existing = latest.get(row.keyword)
        if existing is None or _period(row) > _period(existing):
            latest[row.keyword] = row
    return list(latest.values())


def _period(row: Row) -> tuple[int, int]:
    return row.year, month_ordinal(row.month) or 0


def quadrant_points(rows: Iterable[Row], state: FilterState) -> List[ChartDataPoint]:
    return chart_points(latest_per_keyword(filter_rows(rows, state)))


def top_keywords(
    rows: Iterable[Row],
    state: FilterState,
    limit: int = 10,
    sort_by: str = "buzz",
) -> List[ChartDataPoint]:
    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {SORT_KEYS}, got {sort_by!r}")
    points = quadrant_points(rows, state)
    points.sort(key=lambda p: getattr(p, sort_by), reverse=True)
    return points[:limit]


@dataclass(frozen=True)
class BuzzStats:
    total_buzz: float = 0.0
    avg_yoy: float = 0.0
    total_search: float = 0.0
    keyword_count: int = 0
    top_keywords: List[str] = field(default_factory=list)


def _metrics_frame(rows: List[Row]) -> pd.DataFrame:
    """One line per row with NaN-safe buzz / search / yoy(%) columns."""
    return pd.DataFrame(
        {
            "year": [r.year for r in rows],
            "month": [r.month for r in rows],
            "category": [r.category for r in rows],
            "buzz": [_num(r.ttl_buzz) for r in rows],
            "search": [_search_total(r) for r in rows],
            "yoy": [normalize_percent_value(r.ttl_buzz_yoy) for r in rows],
        }
    )


def calculate_stats(rows: Iterable[Row], state: FilterState) -> BuzzStats:
    """
    Headline numbers for the filtered rows.

    total_buzz / total_search / avg_yoy are computed over every matching row;
    keyword_count and top_keywords use the latest row per keyword.
    """
    matched = filter_rows(rows, state)
    if not matched:
        return BuzzStats()

    df = _metrics_frame(matched)
    latest = latest_per_keyword(matched)
    ranked = sorted(latest, key=lambda r: _num(r.ttl_buzz), reverse=True)

    return BuzzStats(
        total_buzz=float(df["buzz"].sum()),
        avg_yoy=float(df["yoy"].mean()),
        total_search=float(df["search"].sum()),
        keyword_count=len(latest),
        top_keywords=[r.keyword for r in ranked[:10]],
    )


@dataclass(frozen=True)
class TrendPoint:
    month: str  # "2024-1月"
    value: float
    category: str


def trend_data(rows: Iterable[Row], state: FilterState, metric: str = "buzz") -> List[TrendPoint]:
    """
    Monthly series per category for the filtered rows.

    `metric` is summed per (year, month, category); yoy sums the percent
    values. Points are ordered by year then month ordinal, and by first
    appearance within the same month.
    """
    if metric not in SORT_KEYS:
        raise ValueError(f"metric must be one of {SORT_KEYS}, got {metric!r}")

    matched = filter_rows(rows, state)
    if not matched:
        return []

    grouped = (
        _metrics_frame(matched)
        .groupby(["year", "month", "category"], sort=False)[metric]
        .sum()
        .reset_index()
    )
    grouped["ordinal"] = grouped["month"].map(lambda m: month_ordinal(m) or 0)
    grouped = grouped.sort_values(["year", "ordinal"], kind="stable")

    return [
        TrendPoint(month=f"{year}-{month}", value=float(value), category=category)
        for year, month, category, value in grouped[["year", "month", "category", metric]].itertuples(index=False)
    ]
