from __future__ import annotations

import re
from typing import Iterable, List, Optional, Union

MONTH_NAMES = [f"{i}月" for i in range(1, 13)]

_ENGLISH_MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}

_NUMERIC_LABEL = re.compile(r"^(\d{1,2})\s*月?$")


def month_ordinal(month: Union[str, int, None]) -> Optional[int]:
    """
    Map a month label to 1-12.

    Accepts "3月", "03", "3", "Mar", "March" and plain ints.
    Returns None for anything outside the canonical table.
    """
    if month is None or isinstance(month, bool):
        return None

    if isinstance(month, int):
        return month if 1 <= month <= 12 else None

    label = str(month).strip()
    match = _NUMERIC_LABEL.match(label)
    if match:
        num = int(match.group(1))
        return num if 1 <= num <= 12 else None

    return _ENGLISH_MONTHS.get(label.lower())


def month_ordinals(months: Iterable[Union[str, int]]) -> List[int]:
    """Sorted, de-duplicated ordinals; unknown labels are dropped."""
    ordinals = {month_ordinal(m) for m in months}
    ordinals.discard(None)
    return sorted(ordinals)


def month_display_name(ordinal: int) -> str:
    return MONTH_NAMES[ordinal - 1]
