from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Iterable, Optional, Tuple


def _as_tuple(values: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(str(v) for v in values)


@dataclass(frozen=True)
class TimeFilter:
    """
    Year + month selection.

    An unset year or an empty months tuple means "no time restriction".
    """

    year: Optional[int] = None
    months: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "months", _as_tuple(self.months))

    def is_active(self) -> bool:
        return self.year is not None or len(self.months) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {"year": self.year, "months": list(self.months)}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> TimeFilter:
        if not data:
            return cls()
        year = data.get("year")
        return cls(
            year=int(year) if year is not None else None,
            months=_as_tuple(data.get("months", [])),
        )


@dataclass(frozen=True)
class FilterState:
    """
    Represents the analyst's filter selection.

    Fields:

    - categories: category names to keep
    - time_filter: year + months to keep
    - quadrants: quadrant labels to keep
    - keyword: case-insensitive substring matched against Row.keyword

    An empty field leaves its dimension unconstrained, so the default
    FilterState() matches every row.
    """

    categories: Tuple[str, ...] = ()
    time_filter: TimeFilter = field(default_factory=TimeFilter)
    quadrants: Tuple[str, ...] = ()
    keyword: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "categories", _as_tuple(self.categories))
        object.__setattr__(self, "quadrants", _as_tuple(self.quadrants))
        if isinstance(self.time_filter, dict):
            object.__setattr__(self, "time_filter", TimeFilter.from_dict(self.time_filter))
        object.__setattr__(self, "keyword", self.keyword or "")

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def merged(self, **partial: Any) -> FilterState:
        """
        Shallow merge: only the given fields are replaced.

        Raises TypeError for names that are not FilterState fields.
        """
        unknown = set(partial) - set(self.field_names())
        if unknown:
            raise TypeError(f"Unknown filter field(s): {', '.join(sorted(unknown))}")
        return replace(self, **partial)

    def has_active_filters(self) -> bool:
        return bool(
            self.categories
            or self.time_filter.is_active()
            or self.quadrants
            or self.keyword.strip()
        )

    def without(self, dimension: str, value: Optional[str] = None) -> FilterState:
        """
        Drop one active filter tag.

        For categories/quadrants removes `value`; for keyword/time_filter
        resets the whole dimension.
        """
        if dimension == "categories":
            return self.merged(categories=[c for c in self.categories if c != value])
        if dimension == "quadrants":
            return self.merged(quadrants=[q for q in self.quadrants if q != value])
        if dimension == "keyword":
            return self.merged(keyword="")
        if dimension == "time_filter":
            return self.merged(time_filter=TimeFilter())
        raise TypeError(f"Unknown filter field: {dimension}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categories": list(self.categories),
            "time_filter": self.time_filter.to_dict(),
            "quadrants": list(self.quadrants),
            "keyword": self.keyword,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FilterState:
        return cls(
            categories=_as_tuple(data.get("categories", [])),
            time_filter=TimeFilter.from_dict(data.get("time_filter")),
            quadrants=_as_tuple(data.get("quadrants", [])),
            keyword=str(data.get("keyword") or ""),
        )


DEFAULT_FILTERS = FilterState()
