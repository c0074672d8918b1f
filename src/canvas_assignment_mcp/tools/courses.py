"""Course listing tool function."""

from __future__ import annotations

import logging
from typing import Optional

from ..client import CanvasClient
from ..config import AppConfig
from ..course_source import CourseAccessor
from ..errors import AppError
from ..schemas import ListCoursesInput, ToolResult
from ..utils import render_course_list

logger = logging.getLogger(__name__)


def list_courses(
    config: AppConfig,
    accessor: Optional[CourseAccessor],
    params: ListCoursesInput,
) -> ToolResult:
    """List the user's courses for an enrollment state, with their terms."""

    if accessor is None:
        accessor = CanvasClient(config)
    try:
        courses = accessor.fetch_courses(params.state, include_term=True)
    except AppError as exc:
        logger.error("Listing %s courses failed: %s", params.state, exc.code)
        return ToolResult.failure(f"Failed to fetch courses: {exc.message}")
    return ToolResult.text(render_course_list(courses, params.state))
