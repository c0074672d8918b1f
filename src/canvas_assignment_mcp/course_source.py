"""Course source abstraction layer.

Defines the contract the search and tool code uses to talk to Canvas.
The production implementation is `CanvasClient` (see `client.py`); tests
substitute in-memory implementations. Every method raises an `AppError`
subclass (`RemoteError`, `TimeoutErrorApp`, `ConfigurationError`) on
failure rather than returning partial data.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Literal, Optional

from .schemas import Assignment, Course, CourseState

Bucket = Literal["past", "future"]


class CourseAccessor(ABC):
    """Abstract interface for reading courses and assignments."""

    @abstractmethod
    def fetch_course(self, course_id: str) -> Course:
        """Fetch a single course by id."""

    @abstractmethod
    def fetch_courses(
        self, state: CourseState = "active", *, include_term: bool = False
    ) -> List[Course]:
        """Fetch the user's courses filtered by enrollment state.

        Args:
            state: 'active', 'completed' or 'all'.
            include_term: Ask Canvas to embed the enrollment term.
        """

    @abstractmethod
    def fetch_assignments(
        self,
        course_id: str,
        *,
        page_size: int = 50,
        bucket: Optional[Bucket] = None,
        due_after: Optional[str] = None,
        due_before: Optional[str] = None,
    ) -> List[Assignment]:
        """Fetch one page of a course's assignments.

        Args:
            course_id: Owning course.
            page_size: Number of assignments requested (single page).
            bucket: Optional server-side due-date bucket hint.
            due_after: Optional UTC ISO 8601 lower bound forwarded to Canvas.
            due_before: Optional UTC ISO 8601 upper bound forwarded to Canvas.
        """

    @abstractmethod
    def fetch_assignment(self, course_id: str, assignment_id: str) -> Assignment:
        """Fetch one assignment of a course."""

    @abstractmethod
    def fetch_current_user(self) -> Dict[str, object]:
        """Return the authenticated user's profile (used for startup checks)."""
