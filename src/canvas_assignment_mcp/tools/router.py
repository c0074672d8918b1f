"""Name-based dispatch for transports that call tools by name.

Accepts both ``snake_case`` and ``kebab-case`` tool names, validates the
raw parameter mapping against the tool's input model, and always returns
a `ToolResult`: unexpected exceptions are logged and replaced by a fixed
generic message so no internal detail reaches the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..config import AppConfig
from ..course_source import CourseAccessor
from ..errors import GENERIC_FAILURE_MESSAGE, ValidationError
from ..schemas import (
    AssignmentContentInput,
    GetAssignmentInput,
    ListCoursesInput,
    SearchCriteria,
    ToolResult,
)
from .assignments import assignment_content, get_assignment, search_assignments
from .courses import list_courses

logger = logging.getLogger(__name__)

ToolFn = Callable[[AppConfig, Optional[CourseAccessor], Any], ToolResult]

TOOLS: Dict[str, Tuple[Type[BaseModel], ToolFn]] = {
    "list_courses": (ListCoursesInput, list_courses),
    "search_assignments": (SearchCriteria, search_assignments),
    "get_assignment": (GetAssignmentInput, get_assignment),
    "assignment_content": (AssignmentContentInput, assignment_content),
}


def normalize_tool_name(name: str) -> str:
    return (name or "").strip().replace("-", "_")


def validate_params(tool: str, model: Type[BaseModel], params: Mapping[str, Any]):
    """Validate raw parameters, raising `ValidationError` naming bad fields."""

    try:
        return model.model_validate(dict(params or {}))
    except PydanticValidationError as exc:
        fields = sorted(
            {".".join(str(p) for p in err["loc"]) or "params" for err in exc.errors()}
        )
        raise ValidationError(
            f"Invalid parameters for {tool}: {', '.join(fields)}",
            {"fields": fields},
        ) from exc


def dispatch(
    tool: str,
    params: Optional[Mapping[str, Any]],
    config: AppConfig,
    accessor: Optional[CourseAccessor] = None,
) -> ToolResult:
    """Run a tool by name.

    Args:
        tool: Tool name, e.g. 'search_assignments' or 'search-assignments'.
        params: Raw JSON-like parameters (camelCase or snake_case keys).
        config: Application configuration.
        accessor: Course source; a `CanvasClient` is created when None.

    Returns:
        The tool's result, or a failed result for unknown tools, invalid
        parameters and unexpected errors.
    """

    entry = TOOLS.get(normalize_tool_name(tool))
    if entry is None:
        return ToolResult.failure(f"Unknown tool/resource: {tool}")
    model, fn = entry
    try:
        validated = validate_params(tool, model, params or {})
        return fn(config, accessor, validated)
    except ValidationError as exc:
        return ToolResult.failure(exc.message)
    except Exception:
        logger.exception("Tool %s failed unexpectedly", tool)
        return ToolResult.failure(GENERIC_FAILURE_MESSAGE)
