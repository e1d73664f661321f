"""
Search filter state and pagination.

FilterState holds every query parameter the course-search API understands.
Empty strings and False mean "not set" and are never sent.

Pagination helpers compute the page count, the "Showing X to Y of Z" range
and the compact page-number window (1 ... 4 5 6 ... 20).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Any, List, Mapping, Tuple, Union


DEFAULT_LIMIT = 20
MAX_VISIBLE_PAGES = 7
ELLIPSIS = "..."

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _availability(day: str, edge: str) -> Any:
    # the API uses camelCase for the availability window, e.g. mondayStartTime
    return field(default="", metadata={"param": f"{day}{edge}Time"})


@dataclass
class FilterState:
    search_param: str = ""
    status: str = ""
    min_available_seats: str = ""
    instruction_mode: str = ""
    limit: str = str(DEFAULT_LIMIT)
    min_credits: str = ""
    max_credits: str = ""
    level: str = ""
    ethnic_studies: str = ""
    social_science: str = ""
    humanities: str = ""
    biological_science: str = ""
    physical_science: str = ""
    natural_science: str = ""
    literature: str = ""
    min_cumulative_gpa: str = ""
    min_most_recent_gpa: str = ""
    median_grade: str = ""
    min_a_percent: str = ""
    min_section_avg_rating: str = ""
    min_section_avg_difficulty: str = ""
    min_section_total_ratings: str = ""
    min_section_avg_would_take_again: str = ""
    no_prereqs: bool = False
    sophomore_standing: bool = False
    junior_standing: bool = False
    senior_standing: bool = False
    monday_start_time: str = _availability("monday", "Start")
    monday_end_time: str = _availability("monday", "End")
    tuesday_start_time: str = _availability("tuesday", "Start")
    tuesday_end_time: str = _availability("tuesday", "End")
    wednesday_start_time: str = _availability("wednesday", "Start")
    wednesday_end_time: str = _availability("wednesday", "End")
    thursday_start_time: str = _availability("thursday", "Start")
    thursday_end_time: str = _availability("thursday", "End")
    friday_start_time: str = _availability("friday", "Start")
    friday_end_time: str = _availability("friday", "End")
    saturday_start_time: str = _availability("saturday", "Start")
    saturday_end_time: str = _availability("saturday", "End")
    sunday_start_time: str = _availability("sunday", "Start")
    sunday_end_time: str = _availability("sunday", "End")

    def to_params(self, page: int = 1) -> List[Tuple[str, str]]:
        """
        Build the query string pairs: page first, then every set filter
        in declaration order. Booleans are sent as "true".
        """
        params: List[Tuple[str, str]] = [("page", str(page))]
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value is False or value == "":
                continue
            name = f.metadata.get("param", f.name)
            if value is True:
                params.append((name, "true"))
            else:
                params.append((name, str(value).strip()))
        return params

    def to_dict(self, include_empty: bool = False) -> dict[str, Union[str, bool]]:
        out: dict[str, Union[str, bool]] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if include_empty or (value is not False and value != ""):
                out[f.name] = value
        return out

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FilterState":
        """
        Build a FilterState from a dict; unknown keys are ignored.
        Both snake_case field names and the API's camelCase names are accepted.
        """
        state = cls()
        by_param = {f.metadata.get("param", f.name): f for f in fields(cls)}
        by_name = {f.name: f for f in fields(cls)}
        for key, value in data.items():
            f = by_name.get(key) or by_param.get(key)
            if f is None or value is None:
                continue
            if f.type in ("bool", bool):
                setattr(state, f.name, _as_bool(value))
            else:
                setattr(state, f.name, str(value).strip())
        return state

    def reset(self) -> None:
        """
        Restore all defaults in place.
        """
        defaults = FilterState()
        for f in fields(self):
            setattr(self, f.name, getattr(defaults, f.name))


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def results_per_page(filters: FilterState) -> int:
    """
    Page size from the `limit` filter; falls back to DEFAULT_LIMIT.
    """
    try:
        limit = int(str(filters.limit).strip())
    except ValueError:
        return DEFAULT_LIMIT
    return limit if limit > 0 else DEFAULT_LIMIT


def total_pages(total_count: int, per_page: int) -> int:
    if total_count <= 0 or per_page <= 0:
        return 0
    return math.ceil(total_count / per_page)


def result_range(page: int, per_page: int, total_count: int) -> Tuple[int, int]:
    """
    1-based (first, last) result numbers shown on a page.
    """
    if total_count <= 0:
        return (0, 0)
    start = (page - 1) * per_page + 1
    end = min(page * per_page, total_count)
    return (start, end)


def page_numbers(current: int, total: int, max_visible: int = MAX_VISIBLE_PAGES) -> List[Union[int, str]]:
    """
    Compact page list for pagination controls.

    Small totals list every page. Otherwise: first page, "..." when the
    current page is far from the start, the current page and its
    neighbours, "..." when far from the end, and the last page.
    """
    pages: List[Union[int, str]] = []
    if total <= max_visible:
        return list(range(1, total + 1))

    pages.append(1)
    if current > 4:
        pages.append(ELLIPSIS)

    start = max(2, current - 1)
    end = min(total - 1, current + 1)
    pages.extend(range(start, end + 1))

    if current < total - 3:
        pages.append(ELLIPSIS)

    if total > 1:
        pages.append(total)

    return pages
