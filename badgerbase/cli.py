"""
CLI (Command Line Interface).

Terminal commands around the course-search API and the subscription backend:

    badgerbase search [text] [--page N] [filters...]
    badgerbase sections <designation> [--expand] [--file response.json]
    badgerbase subscribe course <course_id>
    badgerbase subscribe section <section_id> [--name "LEC 001"] [--title ...]
    badgerbase unsubscribe course|section <id>
    badgerbase subscriptions

Each command handler returns an exit code; main() exits via SystemExit.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from badgerbase.api import CourseSearchClient, SubscriptionClient
from badgerbase.config import Settings, load_settings
from badgerbase.errors import BadgerBaseError
from badgerbase.filters import FilterState
from badgerbase.grouping import group_sections
from badgerbase.model import Course, SearchPage
from badgerbase.storage import load_saved_filters, save_saved_filters
from badgerbase.view import ExpansionState, render_course, render_search_page, render_subscriptions


logger = logging.getLogger(__name__)

# CLI flag -> FilterState field
FILTER_FLAGS = {
    "status": "status",
    "limit": "limit",
    "min_seats": "min_available_seats",
    "mode": "instruction_mode",
    "level": "level",
    "min_credits": "min_credits",
    "max_credits": "max_credits",
    "min_gpa": "min_cumulative_gpa",
    "min_recent_gpa": "min_most_recent_gpa",
    "median_grade": "median_grade",
    "min_rating": "min_section_avg_rating",
}

BOOL_FLAGS = ("no_prereqs", "sophomore_standing", "junior_standing", "senior_standing")


def _norm_designation(text: str) -> str:
    return "".join(str(text or "").split()).upper()


def _filters_from_args(args: argparse.Namespace) -> FilterState:
    """
    Start from saved filters (--saved) or defaults, then apply CLI flags.
    """
    filters = load_saved_filters() if args.saved else FilterState()
    text = (args.text or "").strip()
    if text:
        filters.search_param = text
    for flag, field_name in FILTER_FLAGS.items():
        value = getattr(args, flag, None)
        if value is not None and str(value).strip():
            setattr(filters, field_name, str(value).strip())
    for flag in BOOL_FLAGS:
        if getattr(args, flag, False):
            setattr(filters, flag, True)
    for day in args.free or []:
        _apply_availability(filters, day)
    return filters


def _apply_availability(filters: FilterState, window_arg: str) -> None:
    """
    Apply one "--free monday=09:00-17:00" availability window.
    """
    day, _, window = window_arg.partition("=")
    start, _, end = window.partition("-")
    day = day.strip().lower()
    if not day or not start.strip() or not end.strip():
        raise ValueError(f"Invalid availability window: {window_arg!r} (expected day=HH:MM-HH:MM)")
    start_field = f"{day}_start_time"
    if not hasattr(filters, start_field):
        raise ValueError(f"Unknown weekday: {day!r}")
    setattr(filters, start_field, start.strip())
    setattr(filters, f"{day}_end_time", end.strip())


def _cmd_search(args: argparse.Namespace, client: CourseSearchClient, console: Console) -> int:
    """
    Search courses and print one page of results.
    """
    if args.page < 1:
        print("Page must be 1 or higher.")
        return 1
    try:
        filters = _filters_from_args(args)
    except ValueError as exc:
        print(str(exc))
        return 1

    if args.save:
        save_saved_filters(filters)
        print("Filters saved.")

    page = client.search(filters, page=args.page)
    render_search_page(page, filters, current_page=args.page, console=console)
    return 0


def _load_courses_file(path: Path) -> List[Course]:
    """
    Load courses from a saved API response: either the search envelope
    ({"data": [...]}), a list of courses or a single course object.
    """
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, list):
        return [Course.from_dict(x) for x in raw if isinstance(x, dict)]
    if isinstance(raw, dict) and "data" in raw:
        return SearchPage.from_dict(raw).courses
    return [Course.from_dict(raw)]


def _find_course(courses: List[Course], designation: str) -> Optional[Course]:
    wanted = _norm_designation(designation)
    for course in courses:
        names = (course.course_designation, course.full_course_designation, course.course_id)
        if wanted in {_norm_designation(n) for n in names if n}:
            return course
    return None


def _cmd_sections(args: argparse.Namespace, client: CourseSearchClient, console: Console) -> int:
    """
    Show the hierarchical sections of one course.
    """
    designation = (args.designation or "").strip()
    if not designation:
        print("Please provide a course designation (e.g. 'COMP SCI 400').")
        return 1

    if args.file:
        try:
            courses = _load_courses_file(Path(args.file))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError, ValueError) as exc:
            print(f"Could not read {args.file}: {exc}")
            return 1
    else:
        courses = client.search(FilterState(search_param=designation)).courses

    course = _find_course(courses, designation)
    if course is None:
        print(f"Course not found: {designation}")
        return 1

    expansion = ExpansionState()
    if args.expand:
        expansion.expand_all(group_sections(course.sections))
    render_course(course, expansion, console=console)
    return 0


def _cmd_subscribe(args: argparse.Namespace, client: SubscriptionClient) -> int:
    target = (args.id or "").strip()
    if not target:
        print(f"Please provide a {args.target} id.")
        return 1

    if args.target == "course":
        client.subscribe_course(target)
    else:
        client.subscribe_section(target, section_names=args.name or None, course_title=args.title)
    print(f"Successfully subscribed to {args.target} notifications! ({target})")
    return 0


def _cmd_unsubscribe(args: argparse.Namespace, client: SubscriptionClient) -> int:
    target = (args.id or "").strip()
    if not target:
        print(f"Please provide a {args.target} id.")
        return 1

    if args.target == "course":
        client.unsubscribe_course(target)
    else:
        client.unsubscribe_section(target)
    print(f"Unsubscribed from {args.target} notifications. ({target})")
    return 0


def _cmd_subscriptions(args: argparse.Namespace, client: SubscriptionClient, console: Console) -> int:
    render_subscriptions(client.list_subscriptions(), console=console)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="badgerbase", description="BadgerBase course search CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Search for courses")
    p_search.add_argument("text", nargs="?", default="", help="Search text (title, designation, ...)")
    p_search.add_argument("--page", type=int, default=1, help="Result page (default 1)")
    p_search.add_argument("--status", type=str, help="Section status (OPEN, WAITLIST, CLOSED)")
    p_search.add_argument("--limit", type=str, help="Results per page (default 20)")
    p_search.add_argument("--min-seats", type=str, help="Minimum available seats")
    p_search.add_argument("--mode", type=str, help="Instruction mode (e.g. 'Classroom Instruction')")
    p_search.add_argument("--level", type=str, help="Course level (Elementary, Intermediate, Advanced)")
    p_search.add_argument("--min-credits", type=str)
    p_search.add_argument("--max-credits", type=str)
    p_search.add_argument("--min-gpa", type=str, help="Minimum cumulative GPA")
    p_search.add_argument("--min-recent-gpa", type=str, help="Minimum most recent GPA")
    p_search.add_argument("--median-grade", type=str)
    p_search.add_argument("--min-rating", type=str, help="Minimum section instructor rating")
    for flag in BOOL_FLAGS:
        p_search.add_argument(f"--{flag.replace('_', '-')}", action="store_true")
    p_search.add_argument(
        "--free", action="append", metavar="DAY=HH:MM-HH:MM", help="Availability window (repeatable)"
    )
    p_search.add_argument("--saved", action="store_true", help="Start from the saved filters")
    p_search.add_argument("--save", action="store_true", help="Save the resulting filters")

    p_sections = sub.add_parser("sections", help="Show a course's sections grouped by lecture")
    p_sections.add_argument("designation", type=str, help="Course designation (e.g. 'COMP SCI 400')")
    p_sections.add_argument("--expand", action="store_true", help="Expand all lectures and section details")
    p_sections.add_argument("--file", type=str, help="Read courses from a saved API response instead")

    for name, help_text in (("subscribe", "Subscribe to notifications"), ("unsubscribe", "Remove a subscription")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("target", choices=("course", "section"))
        p.add_argument("id", type=str, help="Course or section id")
        if name == "subscribe":
            p.add_argument("--name", action="append", help="Section name, e.g. 'LEC 001' (repeatable)")
            p.add_argument("--title", type=str, help="Course title for the notification")

    sub.add_parser("subscriptions", help="List your subscriptions")

    return parser


def run(args: argparse.Namespace, settings: Settings, console: Optional[Console] = None) -> int:
    """
    Dispatch a parsed command. Service errors are reported, not raised.
    """
    console = console if console is not None else Console()
    try:
        if args.command == "search":
            return _cmd_search(args, CourseSearchClient.from_settings(settings), console)
        if args.command == "sections":
            return _cmd_sections(args, CourseSearchClient.from_settings(settings), console)
        if args.command == "subscribe":
            return _cmd_subscribe(args, SubscriptionClient.from_settings(settings))
        if args.command == "unsubscribe":
            return _cmd_unsubscribe(args, SubscriptionClient.from_settings(settings))
        if args.command == "subscriptions":
            return _cmd_subscriptions(args, SubscriptionClient.from_settings(settings), console)
    except BadgerBaseError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}")
        return 1
    return 2


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, configures logging, dispatches to the
    command handlers and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    raise SystemExit(run(args, settings))
