"""
Formatting helpers for terminal output.

All functions are total: missing or unknown values become "N/A", "TBA"
or are passed through unchanged.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from rich.markup import escape

from badgerbase.grouping import normalize
from badgerbase.model import CLOSED, OPEN, WAITLIST, Instructor, Meeting, Section


STATUS_STYLES = {
    OPEN: "open",
    CLOSED: "closed",
    WAITLIST: "waitlist",
}

# rich colour per style category
STATUS_COLORS = {
    "open": "green",
    "closed": "red",
    "waitlist": "yellow",
    "unknown": "bright_black",
}

MEETING_TYPE_LABELS = {
    "LEC": "Lecture",
    "DIS": "Discussion",
    "LAB": "Lab",
    "SEM": "Seminar",
}


def status_style(status: Optional[str]) -> str:
    """
    Map a section status to one of: open, closed, waitlist, unknown.
    """
    return STATUS_STYLES.get(normalize(status), "unknown")


def status_markup(status: Optional[str]) -> str:
    label = normalize(status) or "N/A"
    return f"[{STATUS_COLORS[status_style(status)]}]{escape(label)}[/]"


def meeting_type_label(code: Optional[str]) -> str:
    """
    LEC -> Lecture, DIS -> Discussion, LAB -> Lab, SEM -> Seminar.
    Unknown codes are returned unchanged.
    """
    return MEETING_TYPE_LABELS.get(normalize(code), "" if code is None else code)


def section_label(types: List[str]) -> str:
    """
    Combined label for a group of meeting types, e.g. "Discussion + Lab".
    """
    if not types:
        return "Section"
    return " + ".join(meeting_type_label(t) for t in types)


def format_meeting_time(start_time: str, end_time: str) -> str:
    return f"{start_time}–{end_time}"


def format_meeting(meeting: Meeting) -> str:
    time_range = format_meeting_time(meeting.start_time, meeting.end_time)
    return f"{meeting.meeting_days} {time_range} ({meeting.effective_location})"


def format_meeting_display(meetings: Iterable[Meeting]) -> str:
    """
    One display string for several meetings, joined with ", ".
    """
    return ", ".join(format_meeting(m) for m in meetings)


def format_rating(value: Optional[float]) -> str:
    # 0 means "no ratings yet" in the API data
    return f"{value:.1f}" if value else "N/A"


def format_gpa(value: Optional[float]) -> str:
    return f"{value:.2f}" if value is not None else "N/A"


def format_percent(value: Optional[float]) -> str:
    return f"{value:.1f}%" if value is not None else "N/A"


def format_credits(minimum: Optional[int], maximum: Optional[int]) -> str:
    if minimum is None and maximum is None:
        return "N/A"
    if minimum is None or maximum is None or minimum == maximum:
        return str(minimum if minimum is not None else maximum)
    return f"{minimum}-{maximum}"


def format_enrollment(section: Section) -> str:
    """
    "enrolled/capacity", plus the waitlist size when there is one.
    """
    text = f"{section.enrolled}/{section.capacity}"
    if section.waitlist_total:
        text += f" (+{section.waitlist_total} waitlisted)"
    return text


def format_instructor(instructor: Instructor) -> str:
    name = instructor.name.strip() or "TBA"
    if not instructor.num_ratings:
        return name
    return (
        f"{name} (rating {format_rating(instructor.avg_rating)}, "
        f"difficulty {format_rating(instructor.avg_difficulty)}, "
        f"{instructor.num_ratings} reviews)"
    )


def format_instructors(instructors: Iterable[Instructor]) -> str:
    names = [format_instructor(i) for i in instructors]
    return "; ".join(names) if names else "TBA"
