from __future__ import annotations

import math
from typing import Any, List

from buzz_browser.validation.errors import ValidationIssue, ValidationError

_REQUIRED_ROW_KEYS = ("year", "month", "category")
_FILTER_LIST_KEYS = ("categories", "quadrants")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite_number(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value)


def _check_rows(rows: Any, issues: List[ValidationIssue]) -> None:
    if not isinstance(rows, list):
        issues.append(ValidationIssue("SNAPSHOT_LIST", "rawData", "must be a list"))
        return
    for i, r in enumerate(rows):
        path = f"rawData[{i}]"
        if not isinstance(r, dict):
            issues.append(ValidationIssue("ROW_TYPE", path, "must be an object"))
            continue
        missing = [k for k in _REQUIRED_ROW_KEYS if k not in r]
        if missing:
            issues.append(ValidationIssue("ROW_KEYS", path, f"missing {', '.join(missing)}"))
        elif not _is_finite_number(r["year"]):
            issues.append(ValidationIssue("ROW_YEAR", f"{path}.year", "must be a finite number"))


def _check_categories(categories: Any, issues: List[ValidationIssue]) -> None:
    if not isinstance(categories, list):
        issues.append(ValidationIssue("SNAPSHOT_LIST", "categories", "must be a list"))
        return
    seen: set[str] = set()
    for i, c in enumerate(categories):
        path = f"categories[{i}]"
        if not isinstance(c, dict) or "id" not in c or "name" not in c:
            issues.append(ValidationIssue("CATEGORY_SHAPE", path, "needs id and name"))
            continue
        if c["name"] in seen:
            issues.append(ValidationIssue("CATEGORY_DUP", f"{path}.name", f"'{c['name']}' is duplicated"))
        seen.add(c["name"])


def _check_sheets(sheets: Any, issues: List[ValidationIssue]) -> None:
    if not isinstance(sheets, list):
        issues.append(ValidationIssue("SNAPSHOT_LIST", "sheetInfos", "must be a list"))
        return
    for i, s in enumerate(sheets):
        if not isinstance(s, dict) or "name" not in s:
            issues.append(ValidationIssue("SHEET_SHAPE", f"sheetInfos[{i}]", "needs a name"))


def _check_filters(filters: Any, issues: List[ValidationIssue]) -> None:
    if not isinstance(filters, dict):
        issues.append(ValidationIssue("FILTERS_TYPE", "filters", "must be an object"))
        return
    for key in _FILTER_LIST_KEYS:
        if not isinstance(filters.get(key, []), list):
            issues.append(ValidationIssue("FILTERS_LIST", f"filters.{key}", "must be a list"))
    if not isinstance(filters.get("keyword", ""), str):
        issues.append(ValidationIssue("FILTERS_KEYWORD", "filters.keyword", "must be a string"))

    tf = filters.get("time_filter", {})
    if tf is None:
        return
    if not isinstance(tf, dict):
        issues.append(ValidationIssue("FILTERS_TIME", "filters.time_filter", "must be an object"))
        return
    if not isinstance(tf.get("months", []), list):
        issues.append(ValidationIssue("FILTERS_MONTHS", "filters.time_filter.months", "must be a list"))
    year = tf.get("year")
    if year is not None and not _is_finite_number(year):
        issues.append(ValidationIssue("FILTERS_YEAR", "filters.time_filter.year", "must be a finite number"))


def validate_snapshot_dict(obj: Any) -> None:
    """
    Validate a decoded snapshot BEFORE any of it reaches the store.
    A half-valid snapshot is rejected as a whole.
    """
    if not isinstance(obj, dict):
        raise ValidationError([ValidationIssue("SNAPSHOT_TYPE", "", "snapshot must be a JSON object")])

    issues: List[ValidationIssue] = []

    version = obj.get("schema_version")
    if version is not None and not (isinstance(version, int) and not isinstance(version, bool)):
        issues.append(ValidationIssue("SNAPSHOT_VERSION", "schema_version", "must be an integer"))

    _check_rows(obj.get("rawData", []), issues)
    _check_categories(obj.get("categories", []), issues)
    _check_sheets(obj.get("sheetInfos", []), issues)
    _check_filters(obj.get("filters", {}), issues)

    if issues:
        raise ValidationError(issues)
