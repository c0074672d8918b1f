"""FastMCP server entrypoint.

Registers the Canvas tools and the assignment content resource. This
module intentionally keeps the tool implementations decoupled so they can
be unit-tested without the runtime.

FastMCP is imported inside the functions that need it, so importing the
tool functions and the router does not load the MCP runtime.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from .client import CanvasClient
from .config import AppConfig, load_config
from .course_source import CourseAccessor
from .errors import AppError
from .schemas import (
    AssignmentContentInput,
    GetAssignmentInput,
    ListCoursesInput,
    SearchCriteria,
    ToolResult,
)
from .tools import assignment_content, get_assignment, list_courses, search_assignments

logger = logging.getLogger(__name__)

CONTENT_URI = "canvas://courses/{course_id}/assignments/{assignment_id}"


def _register_fastmcp_tools(app, config: AppConfig, accessor: CourseAccessor):
    from fastmcp.exceptions import ResourceError, ToolError

    def unwrap(result: ToolResult) -> str:
        if result.is_error:
            raise ToolError(result.joined_text)
        return result.joined_text

    @app.tool(name="list_courses")
    def courses_list(params: ListCoursesInput) -> str:
        """Lists all your Canvas courses. Filter by active, completed, or all courses."""
        return unwrap(list_courses(config, accessor, params))

    @app.tool(name="search_assignments")
    def assignments_search(params: SearchCriteria) -> str:
        """Searches for assignments across your courses by title, description and due date."""
        return unwrap(search_assignments(config, accessor, params))

    @app.tool(name="get_assignment")
    def assignments_get(params: GetAssignmentInput) -> str:
        """Retrieves one assignment's details, with its description as full HTML, plain text or Markdown."""
        return unwrap(get_assignment(config, accessor, params))

    @app.resource(CONTENT_URI, name="assignment_content", mime_type="text/markdown")
    def assignments_content(course_id: str, assignment_id: str) -> str:
        """Retrieves the full content of an assignment in a standardized format."""
        try:
            params = AssignmentContentInput(
                course_id=course_id, assignment_id=assignment_id
            )
        except PydanticValidationError as exc:
            raise ResourceError("Missing or invalid courseId or assignmentId") from exc
        result = assignment_content(config, accessor, params)
        if result.is_error:
            raise ResourceError(result.joined_text)
        return result.joined_text


def build_app(config: AppConfig, accessor: CourseAccessor):
    """Create the FastMCP application with every tool and resource registered.

    Unexpected exceptions are masked so only `ToolError` and `ResourceError`
    text reaches the client.
    """

    from fastmcp import FastMCP

    app = FastMCP("canvas-assignment-mcp", mask_error_details=True)
    _register_fastmcp_tools(app, config, accessor)
    return app


def _check_credentials(config: AppConfig, client: CourseAccessor) -> None:
    if not config.api_token:
        logger.warning("CANVAS_API_TOKEN not set. Server will not function correctly.")
    if not config.domain:
        logger.warning("CANVAS_DOMAIN not set. Server will not function correctly.")
    if not config.is_configured:
        return
    logger.info("Environment configured for domain: %s", config.domain)
    try:
        user = client.fetch_current_user()
    except AppError as exc:
        logger.warning("Canvas authentication check failed: %s", exc.message)
        return
    logger.info("Authenticated as %s", user.get("name", "unknown user"))


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="canvas-assignment-mcp",
        description="Serve Canvas courses and assignments over MCP.",
    )
    parser.add_argument(
        "--transport", choices=("stdio", "http", "sse"), default="stdio"
    )
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument(
        "--skip-auth-check",
        action="store_true",
        help="Do not call /users/self at startup",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    """Run the FastMCP application.

    This function loads configuration, creates the Canvas client, and
    registers all tools with the FastMCP runtime. It is safe to import
    and call `main()` from other entrypoints.
    """

    argv = argv if argv is not None else sys.argv[1:]
    args = _parse_args(argv)
    config = load_config()
    # stdout carries the stdio transport; diagnostics go to stderr
    logging.basicConfig(
        level=config.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    client = CanvasClient(config)
    if not args.skip_auth_check:
        _check_credentials(config, client)

    app = build_app(config, client)

    try:
        if args.transport == "stdio":
            app.run(transport="stdio")
        else:
            app.run(transport=args.transport, host=args.host, port=args.port)
    finally:
        client.close()


if __name__ == "__main__":  # pragma: no cover
    main()
