import locale
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Iterable, Optional

from navigation import SortState, ViewState
from value_classifier import field_value, is_row_shaped, to_text


@dataclass(frozen=True)
class ViewRow:
    index: int  # position in the unfiltered source array
    value: Any


def collect_headers(data) -> list[str]:
    headers: list[str] = []
    seen = set()
    if not isinstance(data, list):
        return headers
    for item in data:
        if not isinstance(item, dict):
            continue
        for key in item:
            if key not in seen:
                seen.add(key)
                headers.append(key)
    return headers


def visible_headers(headers: Iterable[str], hidden: Iterable[str]) -> list[str]:
    hidden = set(hidden)
    return [h for h in headers if h not in hidden]


def apply_filters(rows: list[ViewRow], filters: dict[str, str]) -> list[ViewRow]:
    active = [(col, pattern.casefold()) for col, pattern in filters.items() if pattern]
    if not active:
        return list(rows)
    kept = []
    for row in rows:
        if all(
            pattern in to_text(field_value(row.value, col)).casefold()
            for col, pattern in active
        ):
            kept.append(row)
    return kept


def _kind(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "text"
    if isinstance(value, dict):
        return "object"
    return "array"


def compare_text(a: str, b: str) -> int:
    result = locale.strcoll(a.casefold(), b.casefold())
    if result == 0:
        result = locale.strcoll(a, b)
    if result == 0:
        return (a > b) - (a < b)
    return -1 if result < 0 else 1


def compare_values(a, b) -> int:
    kind_a, kind_b = _kind(a), _kind(b)
    if kind_a == kind_b and a == b:
        return 0
    if kind_a == kind_b == "number":
        return (a > b) - (a < b)
    if kind_a == kind_b == "text":
        return compare_text(a, b)
    return compare_text(to_text(a), to_text(b))


def apply_sort(rows: list[ViewRow], sort: Optional[SortState]) -> list[ViewRow]:
    if sort is None:
        return list(rows)
    present = []
    missing = []
    for row in rows:
        if field_value(row.value, sort.column) is None:
            missing.append(row)
        else:
            present.append(row)

    def _cmp(left: ViewRow, right: ViewRow) -> int:
        return compare_values(
            field_value(left.value, sort.column), field_value(right.value, sort.column)
        )

    # sorted() keeps equal rows in input order, reverse=True included
    ordered = sorted(present, key=cmp_to_key(_cmp), reverse=sort.descending)
    return ordered + missing


def query(data, view: ViewState) -> list[ViewRow]:
    if not isinstance(data, list):
        return []
    rows = [ViewRow(i, item) for i, item in enumerate(data)]
    if not is_row_shaped(data):
        return rows
    rows = apply_filters(rows, view.filters)
    return apply_sort(rows, view.sort)
