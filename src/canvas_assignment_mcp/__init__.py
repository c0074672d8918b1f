"""Canvas Assignment MCP Server package.

This package provides a read-only MCP server exposing Canvas LMS courses
and assignments via a small set of tools. The core searches assignments
across many courses (tolerating per-course failures) and normalizes
assignment descriptions into plain text or a constrained Markdown dialect.

Usage example:
    from canvas_assignment_mcp.server import main
    if __name__ == "__main__":
        main()

Note: Tools can also be imported and dispatched by an external transport
through `canvas_assignment_mcp.tools.dispatch`.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
