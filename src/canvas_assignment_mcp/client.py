"""Canvas REST API client.

`CanvasClient` implements `CourseAccessor` on top of a synchronous
`httpx.Client`. Every request shares the configured timeout and a
retrying transport; failures are mapped onto the application's error
classes so callers never see httpx exceptions or raw response bodies.

Usage example:
    client = CanvasClient(load_config())
    courses = client.fetch_courses("active", include_term=True)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from .config import AppConfig
from .course_source import Bucket, CourseAccessor
from .errors import ConfigurationError, RemoteError, TimeoutErrorApp
from .schemas import Assignment, Course, CourseState

logger = logging.getLogger(__name__)


class CanvasClient(CourseAccessor):
    """Course source backed by the Canvas REST API.

    Args:
        config: Application configuration (token, domain, timeouts).
        transport: Optional httpx transport; tests pass an
            `httpx.MockTransport` here.
    """

    def __init__(
        self, config: AppConfig, *, transport: Optional[httpx.BaseTransport] = None
    ) -> None:
        self._config = config
        if transport is None:
            transport = httpx.HTTPTransport(retries=config.max_retries)
        headers = {"Content-Type": "application/json"}
        if config.api_token:
            headers["Authorization"] = f"Bearer {config.api_token}"
        self._http = httpx.Client(
            base_url=config.api_base if config.domain else "",
            headers=headers,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> CanvasClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---------------------- Transport ----------------------

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        if not self._config.api_token:
            raise ConfigurationError(
                "Canvas API token not set. Set the CANVAS_API_TOKEN environment variable."
            )
        if not self._config.domain:
            raise ConfigurationError(
                "Canvas domain not set. Set the CANVAS_DOMAIN environment variable."
            )

        try:
            response = self._http.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise TimeoutErrorApp(
                "Canvas API request timed out.", {"path": path}
            ) from exc
        except httpx.HTTPError as exc:
            logger.debug("Canvas request to %s failed: %s", path, exc)
            raise RemoteError(None, str(exc), {"path": path}) from exc

        if response.is_error:
            logger.debug(
                "Canvas request to %s returned HTTP %s", path, response.status_code
            )
            raise RemoteError(response.status_code, response.text, {"path": path})

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(
                response.status_code,
                response.text,
                {"path": path},
                message="Canvas API returned a response that is not JSON.",
            ) from exc

    def _expect_list(self, data: Any, path: str) -> List[Dict[str, Any]]:
        if not isinstance(data, list):
            raise RemoteError(
                200,
                details={"path": path},
                message="Canvas API returned an unexpected response shape.",
            )
        return [item for item in data if isinstance(item, dict)]

    @staticmethod
    def _validate(model, data: Any, path: str):
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            raise RemoteError(
                200,
                details={"path": path},
                message="Canvas API returned an unexpected response shape.",
            ) from exc

    # ---------------------- CourseAccessor ----------------------

    def fetch_course(self, course_id: str) -> Course:
        path = f"/courses/{course_id}"
        return self._validate(Course, self._get(path), path)

    def fetch_courses(
        self, state: CourseState = "active", *, include_term: bool = False
    ) -> List[Course]:
        path = "/courses"
        params: Dict[str, Any] = {
            "enrollment_state": state,
            "per_page": self._config.page_size,
        }
        if include_term:
            params["include[]"] = "term"
        raw = self._expect_list(self._get(path, params), path)
        # Courses locked by date come back without a name
        visible = [c for c in raw if not c.get("access_restricted_by_date", False)]
        return [self._validate(Course, c, path) for c in visible]

    def fetch_assignments(
        self,
        course_id: str,
        *,
        page_size: int = 50,
        bucket: Optional[Bucket] = None,
        due_after: Optional[str] = None,
        due_before: Optional[str] = None,
    ) -> List[Assignment]:
        path = f"/courses/{course_id}/assignments"
        params: Dict[str, Any] = {"per_page": page_size}
        if bucket:
            params["bucket"] = bucket
        if due_after:
            params["due_after"] = due_after
        if due_before:
            params["due_before"] = due_before
        raw = self._expect_list(self._get(path, params), path)
        return [self._validate(Assignment, a, path) for a in raw]

    def fetch_assignment(self, course_id: str, assignment_id: str) -> Assignment:
        path = f"/courses/{course_id}/assignments/{assignment_id}"
        return self._validate(Assignment, self._get(path), path)

    def fetch_current_user(self) -> Dict[str, object]:
        data = self._get("/users/self")
        return data if isinstance(data, dict) else {}
