from __future__ import annotations

from buzz_browser.core.dataset import ROW_COLUMNS, DatasetContainer
from buzz_browser.core.filter_state import FilterState
from buzz_browser.core.models import Category, Row, SheetInfo


def _make_container() -> DatasetContainer:
    ds = DatasetContainer()
    ds.replace(
        [
            Row(year=2024, month="3月", category="鞋", keyword="跑步鞋", quadrant="高潜"),
            Row(year=2024, month="1月", category="包", keyword="单肩包", quadrant="稳定"),
            Row(year=2023, month="12月", category="包", keyword="托特包"),
            Row(year=2024, month="1月", category="裤子", keyword="阔腿裤", quadrant="高潜"),
        ],
        [Category(id="c1", name="鞋", sheet_name="S")],
        [SheetInfo(name="S", row_count=4, columns=["YEAR"])],
    )
    return ds


def test_new_container_is_empty():
    ds = DatasetContainer()
    assert ds.is_empty()
    assert len(ds) == 0
    assert list(ds.frame().columns) == ROW_COLUMNS
    assert ds.frame().empty


def test_available_values():
    ds = _make_container()
    assert ds.available_years() == [2023, 2024]
    assert ds.available_categories() == sorted(["鞋", "包", "裤子"])
    assert ds.available_quadrants() == sorted(["高潜", "稳定"])
    assert ds.months_for_year(2024) == ["1月", "3月"]
    assert ds.available_months() == ["2023-12月", "2024-1月", "2024-3月"]


def test_frame_is_rebuilt_after_replace():
    ds = _make_container()
    first = ds.frame()
    assert ds.frame() is first
    assert len(first) == 4

    ds.replace([Row(year=2025, month="1月", category="帽子", keyword="渔夫帽")], [], [])
    assert list(ds.frame()["keyword"]) == ["渔夫帽"]


def test_clear_empties_everything():
    ds = _make_container()
    ds.clear()
    assert ds.rows == ()
    assert ds.categories == ()
    assert ds.sheet_infos == ()


def test_filtered_views_agree():
    ds = _make_container()
    state = FilterState(categories=["包"])
    assert [r.keyword for r in ds.filtered_rows(state)] == ["单肩包", "托特包"]
    assert list(ds.filtered_frame(state)["keyword"]) == ["单肩包", "托特包"]
