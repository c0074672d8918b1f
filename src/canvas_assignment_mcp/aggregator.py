"""Assignment search across courses.

Resolves the course scope, fetches and filters each course's assignments
independently, then merges and sorts the survivors. One course failing
(HTTP error, timeout, malformed payload) never aborts the search: every
course yields a `CourseOutcome`, and failed outcomes are logged and left
out of the merge. Only a failure to resolve the scope itself is fatal.

Usage example:
    outcome = search_assignments(SearchCriteria(query="essay"), client)
    for match in outcome.matches:
        print(match.course_name, match.name)
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .course_source import Bucket, CourseAccessor
from .errors import AppError
from .schemas import Assignment, AssignmentMatch, Course, SearchCriteria
from .utils import (
    end_of_day,
    is_within_range,
    parse_date,
    start_of_day,
    strip_to_plain_text,
    to_utc_iso,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseOutcome:
    """Result of searching one course: matches on success, a reason on failure."""

    course: Course
    matches: List[AssignmentMatch] = field(default_factory=list)
    error_code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_code is None


@dataclass
class SearchOutcome:
    """Merged result of a search.

    Attributes:
        matches: Sorted matches from every course that succeeded.
        scope_empty: True when no course was in scope at all.
        courses_searched: Number of courses in scope.
        failed_courses: Outcomes of the courses that were skipped.
    """

    matches: List[AssignmentMatch] = field(default_factory=list)
    scope_empty: bool = False
    courses_searched: int = 0
    failed_courses: List[CourseOutcome] = field(default_factory=list)


@dataclass(frozen=True)
class _FetchPlan:
    bucket: Optional[Bucket] = None
    due_after: Optional[str] = None
    due_before: Optional[str] = None

    @property
    def trusts_bucket(self) -> bool:
        return self.bucket is not None


def search_terms(query: str) -> List[str]:
    """Split a query into lowercase, non-empty whitespace-separated terms."""
    return [term for term in (query or "").lower().split() if term]


def matches_terms(assignment: Assignment, terms: List[str]) -> bool:
    """True if any term occurs in the title or the plain-text description."""

    if not terms:
        return True
    title = assignment.name.lower()
    if any(term in title for term in terms):
        return True
    if assignment.description:
        body = strip_to_plain_text(assignment.description).lower()
        return any(term in body for term in terms)
    return False


def due_sort_key(match: Assignment) -> Tuple[int, float]:
    """Sort key: dated assignments by instant, undated (or unparsable) last."""
    due = parse_date(match.due_at)
    if due is None:
        return (1, 0.0)
    return (0, due.timestamp())


def _plan_fetch(criteria: SearchCriteria, use_bucket_hints: bool) -> _FetchPlan:
    if not use_bucket_hints:
        return _FetchPlan()

    bucket: Optional[Bucket] = None
    if criteria.due_after and not criteria.due_before:
        bucket = "future"
    elif criteria.due_before and not criteria.due_after:
        bucket = "past"

    after = parse_date(criteria.due_after)
    before = parse_date(criteria.due_before)
    return _FetchPlan(
        bucket=bucket,
        due_after=to_utc_iso(start_of_day(after)) if after else None,
        due_before=to_utc_iso(end_of_day(before)) if before else None,
    )


def _resolve_scope(criteria: SearchCriteria, accessor: CourseAccessor) -> List[Course]:
    if criteria.course_id:
        return [accessor.fetch_course(criteria.course_id)]
    state = "all" if criteria.include_completed else "active"
    return accessor.fetch_courses(state)


def _search_course(
    course: Course,
    accessor: CourseAccessor,
    criteria: SearchCriteria,
    terms: List[str],
    plan: _FetchPlan,
    page_size: int,
) -> CourseOutcome:
    try:
        assignments = accessor.fetch_assignments(
            course.id,
            page_size=page_size,
            bucket=plan.bucket,
            due_after=plan.due_after,
            due_before=plan.due_before,
        )
        matches = [
            AssignmentMatch(
                **assignment.model_dump(),
                course_name=course.name,
                course_id=course.id,
            )
            for assignment in assignments
            if matches_terms(assignment, terms)
            # Canvas already bucketed one-sided ranges; keep its answer as is.
            and (
                plan.trusts_bucket
                or is_within_range(
                    assignment.due_at, criteria.due_before, criteria.due_after
                )
            )
        ]
    except AppError as exc:
        logger.warning("Skipping course %s: %s", course.id, exc.code)
        return CourseOutcome(course=course, error_code=exc.code)
    except Exception as exc:
        logger.warning(
            "Skipping course %s: %s", course.id, type(exc).__name__, exc_info=True
        )
        return CourseOutcome(course=course, error_code="INTERNAL_ERROR")
    return CourseOutcome(course=course, matches=matches)


def search_assignments(
    criteria: SearchCriteria,
    accessor: CourseAccessor,
    *,
    page_size: int = 50,
    max_concurrency: int = 4,
    use_bucket_hints: bool = True,
) -> SearchOutcome:
    """Search assignments across the courses selected by `criteria`.

    Args:
        criteria: Query text, optional day bounds and course scope.
        accessor: Source of courses and assignments.
        page_size: Assignments requested per course.
        max_concurrency: Upper bound on courses fetched in parallel.
        use_bucket_hints: Forward due-date bucket hints to the API.

    Returns:
        A `SearchOutcome` with matches sorted by due date, undated last.

    Raises:
        AppError: If the course scope itself cannot be fetched.
    """

    courses = _resolve_scope(criteria, accessor)
    if not courses:
        return SearchOutcome(scope_empty=True)

    terms = search_terms(criteria.query)
    plan = _plan_fetch(criteria, use_bucket_hints)
    workers = max(1, min(max_concurrency, len(courses)))

    def run(course: Course) -> CourseOutcome:
        return _search_course(course, accessor, criteria, terms, plan, page_size)

    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="course")
    try:
        # map() yields in scope order regardless of completion order
        outcomes = list(executor.map(run, courses))
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    merged: List[AssignmentMatch] = []
    failed: List[CourseOutcome] = []
    for outcome in outcomes:
        if outcome.ok:
            merged.extend(outcome.matches)
        else:
            failed.append(outcome)

    if failed:
        logger.info(
            "Searched %d courses, %d skipped after errors", len(courses), len(failed)
        )

    # list.sort is stable, so undated matches keep their merge order
    merged.sort(key=due_sort_key)
    return SearchOutcome(
        matches=merged,
        courses_searched=len(courses),
        failed_courses=failed,
    )

