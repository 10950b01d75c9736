from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

# Categories whose rows carry a subcategory column
SUBCATEGORY_CATEGORIES = ("裤子", "包", "鞋")


def has_subcategories(category: str) -> bool:
    return category in SUBCATEGORY_CATEGORIES


@dataclass(frozen=True)
class Row:
    """
    One analytics record (one keyword, one month).

    Fields:

    - year / month: period the metrics belong to; month is a label such as "1月"
    - category / subcategory: product grouping (subcategory only for SUBCATEGORY_CATEGORIES)
    - keyword: the search/buzz keyword
    - *_buzz, *_search: engagement metrics per platform (小红书 = xhs, 抖音 = douyin)
    - ttl_buzz_yoy / ttl_buzz_mom: ratios (0.25 == +25%)
    - quadrant: growth/attention classification (e.g. "高潜")
    """

    year: int
    month: str
    category: str
    keyword: str

    xhs_buzz: float = 0.0
    douyin_buzz: float = 0.0
    ttl_buzz: float = 0.0
    ttl_buzz_yoy: float = 0.0
    ttl_buzz_mom: float = 0.0

    xhs_search: float = 0.0
    xhs_search_vs_dec: float = 0.0
    douyin_search: float = 0.0
    douyin_search_vs_dec: float = 0.0

    quadrant: str = ""
    subcategory: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Row:
        return cls(
            year=int(data["year"]),
            month=str(data["month"]),
            category=str(data["category"]),
            keyword=str(data.get("keyword") or ""),
            xhs_buzz=float(data.get("xhs_buzz") or 0.0),
            douyin_buzz=float(data.get("douyin_buzz") or 0.0),
            ttl_buzz=float(data.get("ttl_buzz") or 0.0),
            ttl_buzz_yoy=float(data.get("ttl_buzz_yoy") or 0.0),
            ttl_buzz_mom=float(data.get("ttl_buzz_mom") or 0.0),
            xhs_search=float(data.get("xhs_search") or 0.0),
            xhs_search_vs_dec=float(data.get("xhs_search_vs_dec") or 0.0),
            douyin_search=float(data.get("douyin_search") or 0.0),
            douyin_search_vs_dec=float(data.get("douyin_search_vs_dec") or 0.0),
            quadrant=str(data.get("quadrant") or ""),
            subcategory=data.get("subcategory"),
        )


@dataclass(frozen=True)
class Category:
    """One distinct category discovered during ingestion."""

    id: str
    name: str
    sheet_name: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Category:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            sheet_name=str(data.get("sheet_name", "")),
        )


@dataclass(frozen=True)
class SheetInfo:
    name: str
    row_count: int
    columns: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "row_count": self.row_count, "columns": list(self.columns)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SheetInfo:
        return cls(
            name=str(data["name"]),
            row_count=int(data.get("row_count", 0)),
            columns=[str(c) for c in data.get("columns", [])],
        )


@dataclass(frozen=True)
class ChartDataPoint:
    """Per-keyword projection consumed by the chart layer. Never persisted."""

    keyword: str
    buzz: float
    yoy: float
    search: float
    quadrant: str
    category: str
