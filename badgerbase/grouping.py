"""
Section grouping and status aggregation.

Organizes the flat section list of a course into a hierarchy:
- sections with a lecture meeting are grouped by their lecture key
  (days + start + end + location); several sections can share one physical
  lecture, the first one encountered represents it
- the non-lecture meetings (discussions, labs, ...) of those sections become
  children of the lecture
- sections without a lecture meeting stand alone

Output order: lecture groups in first-seen order, then standalone sections
in input order. The hierarchy is recomputed on every call, nothing is cached.

Aggregated status priority (best to worst):
    OPEN > WAITLIST > CLOSED
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional

from badgerbase.model import (
    CLOSED,
    LECTURE,
    OPEN,
    WAITLIST,
    ChildGroup,
    HierarchicalSection,
    LectureGroup,
    Meeting,
    Section,
    StandaloneSection,
)


def normalize(value: Any) -> str:
    """
    Normalize a status or meeting-type code for comparison (uppercase).
    """
    return "" if value is None else str(value).strip().upper()


def lecture_key(meeting: Meeting) -> str:
    """
    Grouping key of a lecture meeting: days, start, end and location.
    """
    return f"{meeting.meeting_days}-{meeting.start_time}-{meeting.end_time}-{meeting.effective_location}"


def _distinct_types(meetings: Iterable[Meeting]) -> List[str]:
    # first-seen order, as spelled in the data
    seen: List[str] = []
    for m in meetings:
        if m.meeting_type not in seen:
            seen.append(m.meeting_type)
    return seen


def _find_lecture(meetings: List[Meeting]) -> Optional[Meeting]:
    for m in meetings:
        if normalize(m.meeting_type) == LECTURE:
            return m
    return None


def _child_group(section: Section, meetings: List[Meeting]) -> ChildGroup:
    types = _distinct_types(meetings)
    return ChildGroup(
        types=types,
        title=str(section.section_id),
        section=section,
        meetings=meetings,
        instructors_by_type={normalize(t): section.instructors for t in types},
    )


def group_sections(sections: Optional[Iterable[Section]]) -> List[HierarchicalSection]:
    """
    Group sections into lecture groups (with children) and standalone sections.

    Every input section ends up in exactly one place:
    - as the representative of a lecture group (first section with that key)
    - as a child group under a lecture (its non-lecture meetings)
    - as a standalone section (no lecture meeting)

    A section whose lecture key is already taken and that has no other
    meetings is kept as a child group with no meetings.
    """
    lectures: Dict[str, LectureGroup] = {}
    standalone: List[StandaloneSection] = []

    for section in sections or []:
        meetings = list(section.meetings or [])
        lecture = _find_lecture(meetings)

        if lecture is None:
            standalone.append(
                StandaloneSection(section=section, meetings=meetings, types=_distinct_types(meetings))
            )
            continue

        key = lecture_key(lecture)
        group = lectures.get(key)
        if group is None:
            group = LectureGroup(key=key, section=section, lecture_meeting=lecture)
            lectures[key] = group
            is_representative = True
        else:
            is_representative = group.section is section

        others = [m for m in meetings if normalize(m.meeting_type) != LECTURE]
        if others or not is_representative:
            group.children.append(_child_group(section, others))

    return [*lectures.values(), *standalone]


def aggregate_status(children: Iterable[ChildGroup]) -> str:
    """
    Roll up child statuses: any OPEN -> OPEN, else any WAITLIST -> WAITLIST,
    else CLOSED. No children -> CLOSED.
    """
    statuses = {normalize(child.section.status) for child in children}
    if OPEN in statuses:
        return OPEN
    if WAITLIST in statuses:
        return WAITLIST
    return CLOSED


def display_status(item: HierarchicalSection) -> str:
    """
    Status shown on the top-level row of a hierarchy item.

    A lecture with children shows the aggregated child status, even when it
    disagrees with the representative section's own status. A lecture
    without children and a standalone section show their own status.
    """
    if isinstance(item, LectureGroup) and item.children:
        return aggregate_status(item.children)
    return normalize(item.section.status)


def iter_sections(hierarchy: Iterable[HierarchicalSection]) -> Iterator[Section]:
    """
    Yield each placed section once, in hierarchy order.

    A representative that also owns a child group is yielded once.
    """
    for item in hierarchy:
        if isinstance(item, StandaloneSection):
            yield item.section
            continue
        child_sources = [child.section for child in item.children]
        if not any(s is item.section for s in child_sources):
            yield item.section
        yield from child_sources
