"""Pydantic schemas for Canvas data, tool inputs and tool outputs.

Canvas identifiers arrive as integers or strings; they are stringified
once here and treated as opaque keys everywhere else. Input models accept
both snake_case and the camelCase names MCP clients send (``courseId``,
``dueBefore``).
"""

from __future__ import annotations

import re
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_SAFE_ID = re.compile(r"^[A-Za-z0-9_.:~-]+$")


def _stringify_id(value: object) -> object:
    if isinstance(value, bool):
        raise ValueError("identifier must be a string or an integer")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


Identifier = Annotated[str, BeforeValidator(_stringify_id)]

CourseState = Literal["active", "completed", "all"]
FormatType = Literal["full", "plain", "markdown"]
DetailSection = Literal["availability", "links"]


class _CanvasModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class Term(_CanvasModel):
    name: str


class Course(_CanvasModel):
    """A course the user is enrolled in.

    Attributes:
        id: Opaque Canvas course identifier.
        name: Course title.
        term: Optional enrollment term, present when requested with
            ``include[]=term``.
    """

    id: Identifier
    name: str
    term: Optional[Term] = None


class Assignment(_CanvasModel):
    """An assignment as returned by the Canvas assignments endpoints.

    Attributes:
        id: Opaque Canvas assignment identifier.
        name: Assignment title.
        description: Untrusted HTML; only ever pattern-matched.
        due_at: ISO 8601 due timestamp, or None.
        points_possible: Maximum score, or None when ungraded.
        submission_types: Canvas submission type keys, e.g. 'online_upload'.
        unlock_at: Optional ISO 8601 availability start.
        lock_at: Optional ISO 8601 availability end.
        html_url: Optional link to the assignment page.
    """

    id: Identifier
    name: str
    description: Optional[str] = None
    due_at: Optional[str] = None
    points_possible: Optional[float] = None
    submission_types: List[str] = Field(default_factory=list)
    unlock_at: Optional[str] = None
    lock_at: Optional[str] = None
    html_url: Optional[str] = None

    @field_validator("submission_types", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return [] if v is None else v


class AssignmentMatch(Assignment):
    """An assignment that survived a search, tagged with its course."""

    course_name: str
    course_id: Identifier


class Link(BaseModel):
    text: str
    href: str


# Inputs


def _check_safe_id(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not _SAFE_ID.match(value):
        raise ValueError("identifier contains unsupported characters")
    return value


class ListCoursesInput(_CanvasModel):
    state: CourseState = Field(
        default="active",
        description="Filter courses by state: active, completed, or all",
    )


class SearchCriteria(_CanvasModel):
    """Assignment search parameters.

    When `course_id` is set the search covers exactly that course and
    `include_completed` is ignored.
    """

    query: str = Field(
        default="",
        description="Search term to find in assignment titles or descriptions",
    )
    due_before: Optional[str] = Field(
        default=None,
        description="Only include assignments due before this date (YYYY-MM-DD)",
    )
    due_after: Optional[str] = Field(
        default=None,
        description="Only include assignments due after this date (YYYY-MM-DD)",
    )
    include_completed: bool = Field(
        default=False, description="Include assignments from completed courses"
    )
    course_id: Optional[Identifier] = Field(
        default=None, description="Optional: Limit search to a specific course ID"
    )

    @field_validator("query", mode="before")
    @classmethod
    def _none_query_is_empty(cls, v):
        return "" if v is None else v

    @field_validator("due_before", "due_after", "course_id", mode="before")
    @classmethod
    def _blank_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("course_id")
    @classmethod
    def _safe_course_id(cls, v):
        return _check_safe_id(v)


class GetAssignmentInput(_CanvasModel):
    course_id: Identifier = Field(description="Course ID")
    assignment_id: Identifier = Field(description="Assignment ID")
    format_type: FormatType = Field(
        default="markdown",
        description="Format type: full (HTML), plain (text only), or markdown (formatted)",
    )
    sections: Optional[List[DetailSection]] = Field(
        default=None,
        description="Extra sections to append: availability dates, links",
    )

    @field_validator("course_id", "assignment_id")
    @classmethod
    def _safe_ids(cls, v):
        return _check_safe_id(v)


class AssignmentContentInput(_CanvasModel):
    course_id: Identifier = Field(description="Course ID")
    assignment_id: Identifier = Field(description="Assignment ID")

    @field_validator("course_id", "assignment_id")
    @classmethod
    def _safe_ids(cls, v):
        return _check_safe_id(v)


# Outputs


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Presentation returned to the transport: text blocks plus error flag."""

    content: List[TextContent]
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> ToolResult:
        return cls(content=[TextContent(text=text)])

    @classmethod
    def failure(cls, text: str) -> ToolResult:
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def joined_text(self) -> str:
        return "\n".join(block.text for block in self.content)
