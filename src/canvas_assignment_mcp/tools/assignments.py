"""Assignment tool functions.

These functions implement the read-only assignments surface: search
across courses, a detail view with selectable description format, and
the uniform content view served as an MCP resource.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..aggregator import search_assignments as run_search
from ..client import CanvasClient
from ..config import AppConfig
from ..course_source import CourseAccessor
from ..errors import AppError
from ..schemas import (
    AssignmentContentInput,
    FormatType,
    GetAssignmentInput,
    SearchCriteria,
    ToolResult,
)
from ..utils import (
    NO_DESCRIPTION,
    render_assignment_content,
    render_assignment_detail,
    render_no_courses,
    render_no_results,
    render_search_results,
    require_date,
    strip_to_plain_text,
    to_constrained_markdown,
)

logger = logging.getLogger(__name__)


def render_description(description: Optional[str], format_type: FormatType) -> str:
    """Render a description as raw HTML ('full'), plain text or Markdown."""

    if format_type == "full":
        return description or NO_DESCRIPTION
    if format_type == "plain":
        return strip_to_plain_text(description) or NO_DESCRIPTION
    return to_constrained_markdown(description) if description else NO_DESCRIPTION


def search_assignments(
    config: AppConfig,
    accessor: Optional[CourseAccessor],
    params: SearchCriteria,
) -> ToolResult:
    """Search assignments by text and due-date range across courses."""

    if accessor is None:
        accessor = CanvasClient(config)
    try:
        if config.strict_dates:
            if params.due_before:
                require_date(params.due_before, field="dueBefore")
            if params.due_after:
                require_date(params.due_after, field="dueAfter")
        outcome = run_search(
            params,
            accessor,
            page_size=config.page_size,
            max_concurrency=config.max_concurrency,
            use_bucket_hints=config.use_bucket_hints,
        )
    except AppError as exc:
        logger.error("Assignment search failed: %s", exc.code)
        return ToolResult.failure(f"Search failed: {exc.message}")

    if outcome.scope_empty:
        return ToolResult.text(render_no_courses())
    if not outcome.matches:
        return ToolResult.text(
            render_no_results(params.query, params.due_before, params.due_after)
        )
    return ToolResult.text(
        render_search_results(outcome.matches, params.query, tz=config.display_tz)
    )


def get_assignment(
    config: AppConfig,
    accessor: Optional[CourseAccessor],
    params: GetAssignmentInput,
) -> ToolResult:
    """Get one assignment's details with the description in the chosen format."""

    if accessor is None:
        accessor = CanvasClient(config)
    try:
        assignment = accessor.fetch_assignment(params.course_id, params.assignment_id)
    except AppError as exc:
        logger.error(
            "Fetching assignment %s of course %s failed: %s",
            params.assignment_id,
            params.course_id,
            exc.code,
        )
        return ToolResult.failure(f"Failed to fetch assignment details: {exc.message}")

    description = render_description(assignment.description, params.format_type)
    text = render_assignment_detail(
        assignment,
        params.course_id,
        description,
        sections=params.sections,
        tz=config.display_tz,
    )
    return ToolResult.text(text)


def assignment_content(
    config: AppConfig,
    accessor: Optional[CourseAccessor],
    params: AssignmentContentInput,
) -> ToolResult:
    """Get one assignment in the uniform content layout (raw description)."""

    if accessor is None:
        accessor = CanvasClient(config)
    try:
        assignment = accessor.fetch_assignment(params.course_id, params.assignment_id)
    except AppError as exc:
        logger.error(
            "Fetching content of assignment %s failed: %s",
            params.assignment_id,
            exc.code,
        )
        return ToolResult.failure(f"Failed to fetch assignment content: {exc.message}")
    return ToolResult.text(render_assignment_content(assignment, tz=config.display_tz))
