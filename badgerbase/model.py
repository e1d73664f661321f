"""
Central data model definitions used across the project.

This module defines the canonical structure of the objects returned by the
course-search API (Course, Section, Meeting, Instructor) and of the derived
hierarchy built by badgerbase.grouping, so that:
- all modules share the same field names
- JSON coming from the API is parsed in exactly one place
- missing fields are defaulted instead of crashing the caller

The hierarchy is a tagged union of two variants (LectureGroup and
StandaloneSection); each carries a `kind` field so callers can dispatch on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


OPEN = "OPEN"
WAITLIST = "WAITLIST"
CLOSED = "CLOSED"

LECTURE = "LEC"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_dict(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object for {what}, got {type(data).__name__}")
    return data


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _opt_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _opt_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, list) else []


# ---------------------------------------------------------------------------
# API records
# ---------------------------------------------------------------------------


@dataclass
class Instructor:
    """
    One instructor of a section, with optional Rate-My-Professor data.

    Rating fields are None when the instructor has no ratings.
    """

    name: str
    rmp_instructor_id: Optional[str] = None
    avg_rating: Optional[float] = None
    avg_difficulty: Optional[float] = None
    num_ratings: Optional[int] = None
    would_take_again_percent: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Instructor":
        d = _require_dict(data, "instructor")
        return cls(
            name=_str(d.get("name")),
            rmp_instructor_id=_opt_str(d.get("rmp_instructor_id")),
            avg_rating=_opt_float(d.get("avg_rating")),
            avg_difficulty=_opt_float(d.get("avg_difficulty")),
            num_ratings=_opt_int(d.get("num_ratings")),
            would_take_again_percent=_opt_float(d.get("would_take_again_percent")),
        )


@dataclass
class Meeting:
    """
    One recurring time/place slot of a section (e.g. "MW 9:55 AM–10:45 AM").
    """

    meeting_type: str
    meeting_days: str = ""
    start_time: str = ""
    end_time: str = ""
    building_name: str = ""
    room: str = ""
    location: str = ""
    meeting_number: Optional[int] = None

    @property
    def effective_location(self) -> str:
        # explicit location wins, otherwise "building room" (may be blank)
        if self.location:
            return self.location
        return f"{self.building_name} {self.room}"

    @classmethod
    def from_dict(cls, data: Any) -> "Meeting":
        d = _require_dict(data, "meeting")
        return cls(
            meeting_type=_str(d.get("meeting_type")),
            meeting_days=_str(d.get("meeting_days")),
            start_time=_str(d.get("start_time")),
            end_time=_str(d.get("end_time")),
            building_name=_str(d.get("building_name")),
            room=_str(d.get("room")),
            location=_str(d.get("location")),
            meeting_number=_opt_int(d.get("meeting_number")),
        )


@dataclass
class Section:
    """
    One schedulable offering of a course with its own status and enrollment.

    Sections are snapshots of the API response and are never mutated.
    """

    section_id: str
    status: str = ""
    available_seats: int = 0
    waitlist_total: int = 0
    capacity: int = 0
    enrolled: int = 0
    instruction_mode: str = ""
    is_asynchronous: bool = False
    instructors: List[Instructor] = field(default_factory=list)
    meetings: List[Meeting] = field(default_factory=list)
    section_requisites: Optional[str] = None
    section_avg_rating: Optional[float] = None
    section_avg_difficulty: Optional[float] = None
    section_total_ratings: Optional[int] = None
    section_avg_would_take_again: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Section":
        d = _require_dict(data, "section")
        return cls(
            section_id=_str(d.get("section_id")),
            status=_str(d.get("status")),
            available_seats=_int(d.get("available_seats")),
            waitlist_total=_int(d.get("waitlist_total")),
            capacity=_int(d.get("capacity")),
            enrolled=_int(d.get("enrolled")),
            instruction_mode=_str(d.get("instruction_mode")),
            is_asynchronous=_bool(d.get("is_asynchronous")),
            instructors=[Instructor.from_dict(x) for x in _list(d.get("instructors"))],
            meetings=[Meeting.from_dict(x) for x in _list(d.get("meetings"))],
            section_requisites=_opt_str(d.get("section_requisites")),
            section_avg_rating=_opt_float(d.get("section_avg_rating")),
            section_avg_difficulty=_opt_float(d.get("section_avg_difficulty")),
            section_total_ratings=_opt_int(d.get("section_total_ratings")),
            section_avg_would_take_again=_opt_float(d.get("section_avg_would_take_again")),
        )


BREADTH_FIELDS = (
    "ethnic_studies",
    "social_science",
    "humanities",
    "biological_science",
    "physical_science",
    "natural_science",
    "literature",
)

GRADE_FIELDS = (
    ("A", "a_percent"),
    ("AB", "ab_percent"),
    ("B", "b_percent"),
    ("BC", "bc_percent"),
    ("C", "c_percent"),
    ("D", "d_percent"),
    ("F", "f_percent"),
)


@dataclass
class Course:
    """
    Represents one catalog course together with its grade distribution
    and its current sections, as returned by the course-search API.
    """

    course_id: str
    course_title: str = ""
    subject_code: str = ""
    course_designation: str = ""
    full_course_designation: str = ""
    course_description: Optional[str] = None
    minimum_credits: Optional[int] = None
    maximum_credits: Optional[int] = None
    level: str = ""
    cumulative_gpa: Optional[float] = None
    most_recent_gpa: Optional[float] = None
    median_grade: str = ""
    grade_percents: Dict[str, Optional[float]] = field(default_factory=dict)
    breadth: Dict[str, str] = field(default_factory=dict)
    enrollment_prerequisites: Optional[str] = None
    madgrades_course_uuid: str = ""
    sections: List[Section] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Course":
        d = _require_dict(data, "course")
        breadth: Dict[str, str] = {}
        for name in BREADTH_FIELDS:
            value = _opt_str(d.get(name))
            if value is not None:
                breadth[name] = value
        return cls(
            course_id=_str(d.get("course_id")),
            course_title=_str(d.get("course_title")),
            subject_code=_str(d.get("subject_code")),
            course_designation=_str(d.get("course_designation")),
            full_course_designation=_str(d.get("full_course_designation")),
            course_description=_opt_str(d.get("course_description")),
            minimum_credits=_opt_int(d.get("minimum_credits")),
            maximum_credits=_opt_int(d.get("maximum_credits")),
            level=_str(d.get("level")),
            cumulative_gpa=_opt_float(d.get("cumulative_gpa")),
            most_recent_gpa=_opt_float(d.get("most_recent_gpa")),
            median_grade=_str(d.get("median_grade")),
            grade_percents={label: _opt_float(d.get(key)) for label, key in GRADE_FIELDS},
            breadth=breadth,
            enrollment_prerequisites=_opt_str(d.get("enrollment_prerequisites")),
            madgrades_course_uuid=_str(d.get("madgrades_course_uuid")),
            sections=[Section.from_dict(x) for x in _list(d.get("sections"))],
        )


@dataclass
class SearchPage:
    """
    One page of results from the course-search API (`/api/query`).
    """

    courses: List[Course] = field(default_factory=list)
    count: int = 0
    total_count: int = 0
    has_more: bool = False
    filters_applied: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> "SearchPage":
        d = _require_dict(data, "search response")
        courses = [Course.from_dict(x) for x in _list(d.get("data"))]
        return cls(
            courses=courses,
            count=_int(d.get("count"), default=len(courses)),
            total_count=_int(d.get("total_count")),
            has_more=bool(d.get("has_more", False)),
            filters_applied=d.get("filters_applied"),
        )


# ---------------------------------------------------------------------------
# Derived hierarchy (built by badgerbase.grouping, never persisted)
# ---------------------------------------------------------------------------


@dataclass
class ChildGroup:
    """
    The non-lecture meetings of one section, shown under its lecture.

    `types` holds the distinct meeting types present (e.g. ["DIS", "LAB"]).
    """

    types: List[str]
    title: str
    section: Section
    meetings: List[Meeting]
    instructors_by_type: Dict[str, List[Instructor]] = field(default_factory=dict)


@dataclass
class LectureGroup:
    """
    A physical lecture (days + times + location) with the sections under it.

    `section` is the first section encountered for this lecture key.
    """

    key: str
    section: Section
    lecture_meeting: Meeting
    children: List[ChildGroup] = field(default_factory=list)
    kind: str = "lecture"


@dataclass
class StandaloneSection:
    """
    A section without a lecture meeting (discussion-only, lab-only, ...).
    """

    section: Section
    meetings: List[Meeting]
    types: List[str]
    kind: str = "standalone"


HierarchicalSection = Union[LectureGroup, StandaloneSection]
