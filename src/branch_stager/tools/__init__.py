"""Tool modules for the branch-stager MCP server.

Each submodule exposes plain functions returning JSON-serializable
dictionaries; ``server.build_tools_dispatch`` registers them by name.
"""

from . import (
    branch_tools,  # noqa: F401
    location_tools,  # noqa: F401
    test_tools,  # noqa: F401
)

__all__ = [
    "branch_tools",
    "location_tools",
    "test_tools",
]
