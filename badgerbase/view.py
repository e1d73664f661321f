"""
Terminal views (rich) and the expand/collapse state of a session.

The hierarchy is rebuilt from the course's sections on every render;
only the set of expanded keys lives across renders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from badgerbase.filters import FilterState, page_numbers, result_range, results_per_page, total_pages
from badgerbase.formatting import (
    format_credits,
    format_enrollment,
    format_gpa,
    format_instructors,
    format_meeting_display,
    format_percent,
    format_rating,
    meeting_type_label,
    section_label,
    status_markup,
)
from badgerbase.grouping import display_status, group_sections
from badgerbase.model import Course, HierarchicalSection, LectureGroup, SearchPage, Section


@dataclass
class ExpansionState:
    """
    Which lecture rows and section detail rows are expanded.

    Lectures are keyed by their lecture key, sections by section id.
    """

    lectures: set[str] = field(default_factory=set)
    sections: set[str] = field(default_factory=set)

    def toggle_lecture(self, key: str) -> bool:
        """
        Flip a lecture row; returns True if it is now expanded.
        """
        if key in self.lectures:
            self.lectures.remove(key)
            return False
        self.lectures.add(key)
        return True

    def toggle_section(self, section_id: str) -> bool:
        if section_id in self.sections:
            self.sections.remove(section_id)
            return False
        self.sections.add(section_id)
        return True

    def is_lecture_expanded(self, key: str) -> bool:
        return key in self.lectures

    def is_section_expanded(self, section_id: str) -> bool:
        return section_id in self.sections

    def expand_all(self, hierarchy: Iterable[HierarchicalSection]) -> None:
        for item in hierarchy:
            if isinstance(item, LectureGroup):
                self.lectures.add(item.key)
                self.sections.update(child.section.section_id for child in item.children)
            self.sections.add(item.section.section_id)

    def collapse_all(self) -> None:
        self.lectures.clear()
        self.sections.clear()


def _console(console: Optional[Console]) -> Console:
    return console if console is not None else Console()


def _text(value: Any) -> str:
    # API strings are plain text, never rich markup
    return escape("" if value is None else str(value))


def course_heading(course: Course) -> str:
    designation = course.full_course_designation or course.course_designation or course.course_id
    title = _text(course.course_title) if course.course_title else "(no title)"
    return f"[bold cyan]{_text(designation)}[/] | {title}"


def _details(section: Section) -> str:
    bits = [
        f"Seats: {section.available_seats} open, {format_enrollment(section)}",
        f"Mode: {_text(section.instruction_mode or 'N/A')}",
        f"Instructors: {_text(format_instructors(section.instructors))}",
    ]
    if section.section_avg_rating:
        bits.append(f"Section rating: {format_rating(section.section_avg_rating)}")
    if section.section_requisites:
        bits.append(f"Requisites: {_text(section.section_requisites)}")
    return "\n".join(bits)


def build_sections_table(
    sections: Iterable[Section], expansion: Optional[ExpansionState] = None
) -> Table:
    """
    Table of the hierarchical sections of one course.

    Collapsed lectures show one row with the aggregated status; expanded
    lectures list their child groups below.
    """
    expansion = expansion if expansion is not None else ExpansionState()
    hierarchy = group_sections(sections)

    table = Table(box=box.SIMPLE, show_lines=False)
    table.add_column("", width=2)
    table.add_column("Section")
    table.add_column("Status")
    table.add_column("Meets")
    table.add_column("Seats", justify="right")

    for item in hierarchy:
        section = item.section
        if isinstance(item, LectureGroup):
            expanded = expansion.is_lecture_expanded(item.key)
            marker = "" if not item.children else ("▼" if expanded else "▶")
            table.add_row(
                marker,
                f"[bold]{_text(meeting_type_label(item.lecture_meeting.meeting_type))}[/] {_text(section.section_id)}",
                status_markup(display_status(item)),
                _text(format_meeting_display([item.lecture_meeting])),
                "" if item.children else str(section.available_seats),
            )
            if expansion.is_section_expanded(section.section_id):
                table.add_row("", "", "", _details(section), "")
            if not expanded:
                continue
            for child in item.children:
                table.add_row(
                    "",
                    f"  └ {_text(section_label(child.types))} {_text(child.title)}",
                    status_markup(child.section.status),
                    _text(format_meeting_display(child.meetings)),
                    str(child.section.available_seats),
                )
                if expansion.is_section_expanded(child.section.section_id):
                    table.add_row("", "", "", _details(child.section), "")
        else:
            table.add_row(
                "",
                f"[bold]{_text(section_label(item.types))}[/] {_text(section.section_id)}",
                status_markup(display_status(item)),
                _text(format_meeting_display(item.meetings) or "N/A"),
                str(section.available_seats),
            )
            if expansion.is_section_expanded(section.section_id):
                table.add_row("", "", "", _details(section), "")

    return table


def render_course(
    course: Course, expansion: Optional[ExpansionState] = None, console: Optional[Console] = None
) -> None:
    """
    Print course header, grade distribution and its section hierarchy.
    """
    out = _console(console)
    out.print(course_heading(course))
    out.print(
        f"Credits: {format_credits(course.minimum_credits, course.maximum_credits)} | "
        f"Level: {_text(course.level or 'N/A')} | "
        f"GPA: {format_gpa(course.cumulative_gpa)} (recent {format_gpa(course.most_recent_gpa)}) | "
        f"Median: {_text(course.median_grade or 'N/A')}"
    )
    grades = " ".join(f"{label} {format_percent(value)}" for label, value in course.grade_percents.items())
    if grades:
        out.print(f"Grades: {grades}")
    if course.breadth:
        out.print("Breadth: " + ", ".join(f"{k.replace('_', ' ')} ({_text(v)})" for k, v in course.breadth.items()))
    if course.enrollment_prerequisites:
        out.print(f"Prerequisites: {_text(course.enrollment_prerequisites)}")

    if not course.sections:
        out.print("No sections.")
        return
    out.print(build_sections_table(course.sections, expansion))


def pagination_line(current_page: int, total: int) -> str:
    bits: List[str] = []
    for p in page_numbers(current_page, total):
        if p == current_page:
            bits.append(f"[bold reverse] {p} [/]")
        else:
            bits.append(str(p))
    return " ".join(bits)


def render_search_page(
    page: SearchPage,
    filters: FilterState,
    current_page: int = 1,
    console: Optional[Console] = None,
) -> None:
    out = _console(console)
    if not page.courses:
        out.print("No results.")
        return

    per_page = results_per_page(filters)
    table = Table(title="Search results", box=box.SIMPLE)
    table.add_column("Course")
    table.add_column("Credits", justify="right")
    table.add_column("GPA", justify="right")
    table.add_column("Sections", justify="right")
    for course in page.courses:
        table.add_row(
            course_heading(course),
            format_credits(course.minimum_credits, course.maximum_credits),
            format_gpa(course.cumulative_gpa),
            str(len(course.sections)),
        )
    out.print(table)

    start, end = result_range(current_page, per_page, page.total_count)
    out.print(f"Showing {start:,} to {end:,} of {page.total_count:,} results")
    pages = total_pages(page.total_count, per_page)
    if pages > 1:
        out.print(pagination_line(current_page, pages))


def render_subscriptions(data: Any, console: Optional[Console] = None) -> None:
    """
    Print the subscription backend's response as tables.

    The backend returns {"course_subscriptions": [...], "section_subscriptions": [...]};
    anything else is printed as-is.
    """
    out = _console(console)
    if not isinstance(data, dict):
        out.print(_text(data) if data else "No subscriptions.")
        return

    printed = False
    for key, title in (("course_subscriptions", "Course subscriptions"), ("section_subscriptions", "Section subscriptions")):
        rows = data.get(key)
        if not isinstance(rows, list) or not rows:
            continue
        table = Table(title=title, box=box.SIMPLE)
        columns = sorted({k for row in rows if isinstance(row, dict) for k in row})
        for col in columns:
            table.add_column(_text(col))
        for row in rows:
            if isinstance(row, dict):
                table.add_row(*[_text(row.get(c)) for c in columns])
        out.print(table)
        printed = True

    if not printed:
        out.print("No subscriptions.")
