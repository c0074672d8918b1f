"""
Tests for cross-course assignment search.

Covers:
- Scope resolution (courseId overrides includeCompleted; empty scope)
- Text filtering on titles and plain-text descriptions
- Date filtering and bucket hints
- Sort order (by due date, undated last, stable)
- Per-course failure isolation and fatal scope failures
"""

import unittest

from canvas_assignment_mcp.aggregator import (
    due_sort_key,
    matches_terms,
    search_assignments,
    search_terms,
)
from canvas_assignment_mcp.errors import RemoteError, TimeoutErrorApp
from canvas_assignment_mcp.schemas import Assignment, SearchCriteria

from fakes import FakeAccessor, assignment

COURSES = [
    {"id": 1, "name": "Math"},
    {"id": 2, "name": "Physics"},
    {"id": 3, "name": "Chemistry"},
]

ASSIGNMENTS = {
    "1": [
        assignment(11, "Problem Set 1", "2024-05-10T12:00:00Z"),
        assignment(12, "Midterm Review", None, "<p>Bring a <b>calculator</b></p>"),
        assignment(13, "Problem Set 2", "2024-04-01T12:00:00Z"),
    ],
    "2": [
        assignment(21, "Lab: Pendulum", "2024-05-01T12:00:00Z"),
        assignment(22, "Reading notes", None),
    ],
    "3": [
        assignment(31, "Titration Lab", "2024-06-20T12:00:00Z", "Use&nbsp;gloves"),
    ],
}


def ids(outcome):
    return [m.id for m in outcome.matches]


class TestSearchHelpers(unittest.TestCase):
    def test_search_terms(self) -> None:
        self.assertEqual(search_terms("  Lab   REPORT \t"), ["lab", "report"])
        self.assertEqual(search_terms(""), [])

    def test_matches_terms_on_description_plain_text(self) -> None:
        item = Assignment.model_validate(
            assignment(1, "Essay", description="<p>use&nbsp;<b>MLA</b> style</p>")
        )
        self.assertTrue(matches_terms(item, ["use mla"]))
        self.assertTrue(matches_terms(item, ["nothing", "style"]))
        self.assertFalse(matches_terms(item, ["<b>"]))

    def test_due_sort_key_places_unparsable_last(self) -> None:
        dated = Assignment.model_validate(assignment(1, "a", "2024-01-01T00:00:00Z"))
        broken = Assignment.model_validate(assignment(2, "b", "someday"))
        self.assertLess(due_sort_key(dated), due_sort_key(broken))


class TestSearchAssignments(unittest.TestCase):
    def test_empty_query_returns_everything_sorted(self) -> None:
        accessor = FakeAccessor(COURSES, ASSIGNMENTS)
        outcome = search_assignments(SearchCriteria(query=""), accessor)
        self.assertEqual(ids(outcome), ["13", "21", "11", "31", "12", "22"])
        self.assertEqual(outcome.courses_searched, 3)
        self.assertEqual(outcome.failed_courses, [])

    def test_matches_are_tagged_with_course(self) -> None:
        accessor = FakeAccessor(COURSES, ASSIGNMENTS)
        outcome = search_assignments(SearchCriteria(query="pendulum"), accessor)
        self.assertEqual(len(outcome.matches), 1)
        match = outcome.matches[0]
        self.assertEqual((match.course_id, match.course_name), ("2", "Physics"))

    def test_any_term_matches_title_or_description(self) -> None:
        accessor = FakeAccessor(COURSES, ASSIGNMENTS)
        outcome = search_assignments(
            SearchCriteria(query="CALCULATOR gloves"), accessor
        )
        self.assertEqual(ids(outcome), ["31", "12"])
        terms = ["calculator", "gloves"]
        for match in outcome.matches:
            haystack = match.name.lower() + " " + (match.description or "").lower()
            self.assertTrue(any(t in haystack.replace("&nbsp;", " ") for t in terms))

    def test_undated_keep_merge_order(self) -> None:
        accessor = FakeAccessor(COURSES, ASSIGNMENTS)
        outcome = search_assignments(SearchCriteria(), accessor)
        undated = [m.id for m in outcome.matches if m.due_at is None]
        self.assertEqual(undated, ["12", "22"])
        self.assertEqual(ids(outcome)[-2:], ["12", "22"])

    def test_one_failing_course_is_skipped(self) -> None:
        accessor = FakeAccessor(
            COURSES, ASSIGNMENTS, failing={"2": RemoteError(500, "boom")}
        )
        outcome = search_assignments(SearchCriteria(query="lab set"), accessor)
        self.assertEqual(ids(outcome), ["13", "11", "31"])
        self.assertEqual([f.course.id for f in outcome.failed_courses], ["2"])
        self.assertEqual(outcome.failed_courses[0].error_code, "REMOTE_ERROR")

    def test_timeouts_and_unexpected_errors_are_skipped(self) -> None:
        accessor = FakeAccessor(
            COURSES,
            ASSIGNMENTS,
            failing={"1": TimeoutErrorApp("slow"), "3": KeyError("oops")},
        )
        outcome = search_assignments(SearchCriteria(), accessor, max_concurrency=2)
        self.assertEqual(ids(outcome), ["21", "22"])
        codes = sorted(f.error_code for f in outcome.failed_courses)
        self.assertEqual(codes, ["INTERNAL_ERROR", "TIMEOUT"])

    def test_all_courses_failing_yields_no_matches(self) -> None:
        failing = {str(c["id"]): RemoteError(None) for c in COURSES}
        accessor = FakeAccessor(COURSES, ASSIGNMENTS, failing=failing)
        outcome = search_assignments(SearchCriteria(query="lab"), accessor)
        self.assertEqual(outcome.matches, [])
        self.assertFalse(outcome.scope_empty)
        self.assertEqual(len(outcome.failed_courses), 3)

    def test_scope_failure_is_fatal(self) -> None:
        accessor = FakeAccessor(COURSES, ASSIGNMENTS, scope_error=RemoteError(401))
        with self.assertRaises(RemoteError):
            search_assignments(SearchCriteria(), accessor)

    def test_empty_scope(self) -> None:
        outcome = search_assignments(SearchCriteria(), FakeAccessor([], {}))
        self.assertTrue(outcome.scope_empty)
        self.assertEqual(outcome.matches, [])

    def test_course_state_scope(self) -> None:
        accessor = FakeAccessor(COURSES, ASSIGNMENTS)
        search_assignments(SearchCriteria(), accessor)
        search_assignments(SearchCriteria(include_completed=True), accessor)
        self.assertEqual(accessor.course_states, ["active", "all"])

    def test_course_id_overrides_state_scope(self) -> None:
        accessor = FakeAccessor(COURSES, ASSIGNMENTS)
        criteria = SearchCriteria.model_validate(
            {"courseId": 3, "includeCompleted": True}
        )
        outcome = search_assignments(criteria, accessor)
        self.assertEqual(ids(outcome), ["31"])
        self.assertEqual(accessor.course_states, [])
        self.assertEqual([c["course_id"] for c in accessor.assignment_calls], ["3"])

    def test_unknown_course_id_is_fatal(self) -> None:
        accessor = FakeAccessor(COURSES, ASSIGNMENTS)
        with self.assertRaises(RemoteError):
            search_assignments(SearchCriteria(course_id="99"), accessor)

    def test_two_sided_range_filters_client_side(self) -> None:
        accessor = FakeAccessor(COURSES, ASSIGNMENTS)
        criteria = SearchCriteria(due_after="2024-04-15", due_before="2024-05-31")
        outcome = search_assignments(criteria, accessor)
        # Undated assignments are never excluded by a date range
        self.assertEqual(ids(outcome), ["21", "11", "12", "22"])
        call = accessor.assignment_calls[0]
        self.assertIsNone(call["bucket"])
        self.assertTrue(call["due_after"].endswith("Z"))
        self.assertTrue(call["due_before"].endswith("Z"))

    def test_one_sided_range_trusts_bucket_hint(self) -> None:
        accessor = FakeAccessor(COURSES, ASSIGNMENTS)
        outcome = search_assignments(SearchCriteria(due_after="2024-05-05"), accessor)
        self.assertEqual({c["bucket"] for c in accessor.assignment_calls}, {"future"})
        # The fake ignores the hint, so nothing is filtered out locally
        self.assertEqual(len(outcome.matches), 6)

        accessor = FakeAccessor(COURSES, ASSIGNMENTS)
        search_assignments(SearchCriteria(due_before="2024-05-05"), accessor)
        self.assertEqual({c["bucket"] for c in accessor.assignment_calls}, {"past"})

    def test_one_sided_range_without_bucket_hints(self) -> None:
        accessor = FakeAccessor(COURSES, ASSIGNMENTS)
        outcome = search_assignments(
            SearchCriteria(due_after="2024-05-05"), accessor, use_bucket_hints=False
        )
        self.assertEqual(ids(outcome), ["11", "31", "12", "22"])
        self.assertEqual({c["bucket"] for c in accessor.assignment_calls}, {None})
        self.assertEqual({c["due_after"] for c in accessor.assignment_calls}, {None})

    def test_page_size_is_forwarded(self) -> None:
        accessor = FakeAccessor(COURSES, ASSIGNMENTS)
        search_assignments(SearchCriteria(), accessor, page_size=20)
        self.assertEqual({c["page_size"] for c in accessor.assignment_calls}, {20})


if __name__ == "__main__":
    unittest.main()
