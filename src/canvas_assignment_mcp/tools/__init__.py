"""MCP tools for listing courses and searching and reading assignments.

Each tool is exposed as a plain Python function to facilitate testing.
An MCP runtime adapter (see `server.py`) registers these with the
FastMCP runtime; other transports can call `dispatch` by tool name. The
tool functions return `ToolResult` models.
"""

from .assignments import (
    assignment_content,
    get_assignment,
    render_description,
    search_assignments,
)
from .courses import list_courses
from .router import TOOLS, dispatch

__all__ = [
    "list_courses",
    "search_assignments",
    "get_assignment",
    "assignment_content",
    "render_description",
    "dispatch",
    "TOOLS",
]
