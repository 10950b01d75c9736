from __future__ import annotations

import itertools

import pytest

from buzz_browser.core.dataset import DatasetContainer
from buzz_browser.core.filter_state import FilterState, TimeFilter
from buzz_browser.core.models import Row
from buzz_browser.core.predicates import (
    filter_frame,
    filter_rows,
    match_category,
    match_keyword,
    match_quadrant,
    match_time,
    matches,
    time_range_label,
)


def _row(**overrides) -> Row:
    base = dict(
        year=2024,
        month="1月",
        category="裤子",
        subcategory="牛仔裤",
        keyword="直筒裤",
        ttl_buzz=3000,
        ttl_buzz_yoy=0.25,
        quadrant="高潜",
    )
    base.update(overrides)
    return Row(**base)


def _make_rows() -> list[Row]:
    return [
        _row(category="裤子", subcategory="牛仔裤", keyword="直筒裤"),
        _row(category="裤子", subcategory="牛仔裤", keyword="阔腿裤", month="2月"),
        _row(category="裤子", subcategory="休闲裤", keyword="运动裤", month="3月", quadrant="稳定"),
        _row(category="包", subcategory="手提包", keyword="单肩包", month="2月"),
        _row(category="包", subcategory="手提包", keyword="托特包", year=2023, quadrant="衰退"),
        _row(category="鞋", subcategory="运动鞋", keyword="Running Shoes", month="3月"),
        _row(category="鞋", subcategory="运动鞋", keyword="休闲鞋", month="4月", quadrant="稳定"),
    ]


def test_category_filter_returns_only_that_category():
    rows = _make_rows()
    result = filter_rows(rows, FilterState(categories=["裤子"]))

    assert len(result) == 3
    assert {r.category for r in result} == {"裤子"}


def test_default_filter_matches_full_dataset():
    rows = _make_rows()
    state = FilterState(categories=[], time_filter=TimeFilter(months=[]), quadrants=[], keyword="")

    assert filter_rows(rows, state) == rows


def test_empty_dataset_with_filter_returns_empty():
    assert filter_rows([], FilterState(categories=["包"], keyword="x")) == []


def test_time_filter_matches_year_and_month_ordinals():
    rows = _make_rows()
    state = FilterState(time_filter=TimeFilter(year=2024, months=["Mar", "01"]))

    result = filter_rows(rows, state)

    assert {r.keyword for r in result} == {"直筒裤", "运动裤", "Running Shoes"}


def test_time_filter_without_months_is_unconstrained():
    rows = _make_rows()
    assert filter_rows(rows, FilterState(time_filter=TimeFilter(year=2023))) == rows


def test_time_filter_months_without_year_is_unconstrained():
    rows = _make_rows()
    assert filter_rows(rows, FilterState(time_filter=TimeFilter(months=["1月"]))) == rows


def test_unknown_row_month_never_matches_an_active_time_filter():
    row = _row(month="Q1")
    assert not match_time(FilterState(time_filter=TimeFilter(year=2024, months=["1月"])), row)


def test_quadrant_filter():
    rows = _make_rows()
    result = filter_rows(rows, FilterState(quadrants=["稳定", "衰退"]))
    assert {r.keyword for r in result} == {"运动裤", "托特包", "休闲鞋"}


@pytest.mark.parametrize("keyword", ["running", "  RUNNING  ", "Shoes"])
def test_keyword_is_trimmed_case_insensitive_substring(keyword):
    rows = _make_rows()
    result = filter_rows(rows, FilterState(keyword=keyword))
    assert [r.keyword for r in result] == ["Running Shoes"]


def test_whitespace_keyword_is_unconstrained():
    rows = _make_rows()
    assert filter_rows(rows, FilterState(keyword="   ")) == rows


def test_empty_dimension_ignores_row_value():
    state = FilterState()
    for category, quadrant, keyword in itertools.product(["裤子", "X"], ["高潜", ""], ["a", ""]):
        row = _row(category=category, quadrant=quadrant, keyword=keyword)
        assert match_category(state, row)
        assert match_quadrant(state, row)
        assert match_keyword(state, row)
        assert match_time(state, row)


def test_matches_is_and_of_single_dimension_filters():
    full = FilterState(
        categories=["裤子", "鞋"],
        time_filter=TimeFilter(year=2024, months=["1月", "2月", "3月"]),
        quadrants=["高潜"],
        keyword="裤",
    )
    only_category = FilterState(categories=full.categories)
    only_time = FilterState(time_filter=full.time_filter)
    only_quadrant = FilterState(quadrants=full.quadrants)
    only_keyword = FilterState(keyword=full.keyword)

    for row in _make_rows():
        expected = (
            matches(only_category, row)
            and matches(only_time, row)
            and matches(only_quadrant, row)
            and matches(only_keyword, row)
        )
        assert matches(full, row) == expected


def test_frame_filter_agrees_with_row_filter():
    ds = DatasetContainer()
    ds.replace(_make_rows(), [], [])
    states = [
        FilterState(),
        FilterState(categories=["包"]),
        FilterState(time_filter=TimeFilter(year=2024, months=["2月", "3月"])),
        FilterState(quadrants=["稳定"], keyword="裤"),
        FilterState(keyword="shoes"),
    ]
    for state in states:
        expected = [r.keyword for r in filter_rows(ds.rows, state)]
        assert list(filter_frame(ds.frame(), state)["keyword"]) == expected


def test_time_range_label_sorts_ordinals():
    state = FilterState(time_filter=TimeFilter(year=2024, months=["3月", "1月"]))
    assert time_range_label(state) == "2024 1月 - 3月"


def test_time_range_label_single_month():
    state = FilterState(time_filter=TimeFilter(year=2025, months=["Jul"]))
    assert time_range_label(state) == "2025 7月"


def test_time_range_label_none_without_selection():
    assert time_range_label(FilterState()) is None
    assert time_range_label(FilterState(time_filter=TimeFilter(year=2024))) is None
    assert time_range_label(FilterState(time_filter=TimeFilter(months=["1月"]))) is None


def test_time_range_label_skips_unknown_months():
    state = FilterState(time_filter=TimeFilter(year=2024, months=["13月", "foo", "5月", "2"]))
    assert time_range_label(state) == "2024 2月 - 5月"

    only_bad = FilterState(time_filter=TimeFilter(year=2024, months=["foo"]))
    assert time_range_label(only_bad) is None
