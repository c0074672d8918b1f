"""Text rendering for tool results.

Generates the fixed-layout text blocks returned to MCP clients. These are
pure functions; the literals and field order are part of the output
contract and covered by golden tests.
"""

from __future__ import annotations

from datetime import tzinfo
from typing import Iterable, List, Optional, Sequence

from ..schemas import Assignment, AssignmentMatch, Course
from .date_parser import NO_DATE_SET, NO_DUE_DATE, format_for_display
from .markup import extract_links

NO_DESCRIPTION = "No description available"
NOT_SPECIFIED = "Not specified"


def _format_points(points: Optional[float]) -> str:
    if points is None:
        return NOT_SPECIFIED
    if float(points).is_integer():
        return str(int(points))
    return str(points)


def _format_submission_types(types: Sequence[str]) -> str:
    return ", ".join(types) or NOT_SPECIFIED


def render_course_list(courses: Sequence[Course], state: str) -> str:
    """Render courses as ``- ID: {id} | {name} ({term})`` lines."""

    if not courses:
        return f"No {state} courses found."
    lines = []
    for course in courses:
        term = f"({course.term.name})" if course.term else ""
        lines.append(f"- ID: {course.id} | {course.name} {term}")
    return f"Your {state} courses:\n\n" + "\n".join(lines)


def render_no_courses() -> str:
    return "No courses found."


def render_no_results(
    query: str, due_before: Optional[str] = None, due_after: Optional[str] = None
) -> str:
    """Describe an empty search, echoing the query and date range."""

    date_range: List[str] = []
    if due_after:
        date_range.append(f"after {due_after}")
    if due_before:
        date_range.append(f"before {due_before}")
    date_str = f" due {' and '.join(date_range)}" if date_range else ""
    query_str = f' matching "{query}"' if query else ""
    return f"No assignments found{query_str}{date_str}."


def render_search_results(
    matches: Sequence[AssignmentMatch], query: str, *, tz: Optional[tzinfo] = None
) -> str:
    blocks = [
        f"- Course: {m.course_name} (ID: {m.course_id})\n"
        f"  Assignment: {m.name} (ID: {m.id})\n"
        f"  Due: {format_for_display(m.due_at, tz=tz)}"
        for m in matches
    ]
    return f'Found {len(matches)} assignments matching "{query}":\n\n' + "\n\n".join(
        blocks
    )


def _render_links(markup: Optional[str]) -> List[str]:
    links = extract_links(markup)
    if not links:
        return ["No links found"]
    return [f"- [{link.text}]({link.href})" for link in links]


def render_assignment_detail(
    assignment: Assignment,
    course_id: str,
    description: str,
    *,
    sections: Optional[Iterable[str]] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    """Render the detail view of one assignment.

    Args:
        assignment: The assignment.
        course_id: Course id as requested by the caller.
        description: Already-rendered description (raw, plain or Markdown).
        sections: Optional extras: 'availability' and/or 'links'.
        tz: Display zone for dates; local time when None.

    Returns:
        Markdown-flavoured text.
    """

    selected = set(sections or [])
    parts = [
        f"# {assignment.name}",
        "",
        f"**Course ID:** {course_id}",
        f"**Assignment ID:** {assignment.id}",
        f"**Due Date:** {format_for_display(assignment.due_at, tz=tz)}",
        f"**Points Possible:** {_format_points(assignment.points_possible)}",
        f"**Submission Type:** {_format_submission_types(assignment.submission_types)}",
    ]
    if "availability" in selected:
        unlock = format_for_display(assignment.unlock_at, fallback=NO_DATE_SET, tz=tz)
        lock = format_for_display(assignment.lock_at, fallback=NO_DATE_SET, tz=tz)
        parts.append(f"**Available From:** {unlock}")
        parts.append(f"**Available Until:** {lock}")
    parts += ["", "## Description", "", description]
    if "links" in selected:
        parts += ["", "## Links", ""]
        parts += _render_links(assignment.description)
    return "\n".join(parts)


def render_assignment_content(
    assignment: Assignment, *, tz: Optional[tzinfo] = None
) -> str:
    """Render the uniform content view; the description is passed through raw."""

    return "\n".join(
        [
            f"# {assignment.name}",
            "",
            f"**Due Date:** {format_for_display(assignment.due_at, fallback=NO_DUE_DATE, tz=tz)}",
            f"**Points Possible:** {_format_points(assignment.points_possible)}",
            f"**Submission Type:** {_format_submission_types(assignment.submission_types)}",
            "",
            "## Description",
            "",
            assignment.description or NO_DESCRIPTION,
        ]
    )
