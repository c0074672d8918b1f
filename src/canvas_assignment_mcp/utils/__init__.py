"""Utility functions for parsing, markup normalization and rendering.

This package includes the date helpers used for filtering and sorting,
the regex-based description converters, and the text renderers used by
the MCP tools.
"""

from .date_parser import (
    NO_DATE_SET,
    NO_DUE_DATE,
    end_of_day,
    format_for_display,
    is_within_range,
    parse_date,
    require_date,
    start_of_day,
    to_utc_iso,
)
from .markup import extract_links, strip_to_plain_text, to_constrained_markdown
from .presentation import (
    NO_DESCRIPTION,
    NOT_SPECIFIED,
    render_assignment_content,
    render_assignment_detail,
    render_course_list,
    render_no_courses,
    render_no_results,
    render_search_results,
)

__all__ = [
    "NO_DATE_SET",
    "NO_DUE_DATE",
    "NO_DESCRIPTION",
    "NOT_SPECIFIED",
    "end_of_day",
    "format_for_display",
    "is_within_range",
    "parse_date",
    "require_date",
    "start_of_day",
    "to_utc_iso",
    "extract_links",
    "strip_to_plain_text",
    "to_constrained_markdown",
    "render_assignment_content",
    "render_assignment_detail",
    "render_course_list",
    "render_no_courses",
    "render_no_results",
    "render_search_results",
]
