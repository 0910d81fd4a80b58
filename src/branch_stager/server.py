"""MCP stdio server entrypoint for branch-stager.

The server runs over standard input/output using the Model Context Protocol
and registers the tool functions from ``branch_stager.tools``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any

from mcp.server.fastmcp import FastMCP

from .constants import DEFAULT_LOG_LEVEL
from .state import close_environment
from .tools import branch_tools, location_tools, test_tools


def build_tools_dispatch() -> dict[str, Callable[..., dict[str, Any]]]:
    """Return a mapping from tool names to callables."""
    return {
        # Locations
        "add_locations": location_tools.add_locations,
        "list_locations": location_tools.list_locations,
        # Tests
        "add_tests": test_tools.add_tests,
        "remove_tests": test_tools.remove_tests,
        "search_tests": test_tools.search_tests,
        # Branch lifecycle
        "merge_branch": branch_tools.merge_branch,
        "close_branch": branch_tools.close_branch,
    }


def main() -> None:
    """Entrypoint for the branch-stager MCP server."""
    # stdout carries the MCP protocol
    logging.basicConfig(
        level=getattr(logging, DEFAULT_LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)
    logger.info("Starting branch-stager MCP server")

    mcp = FastMCP("branch-stager")
    dispatch = build_tools_dispatch()
    for name, func in dispatch.items():
        mcp.add_tool(func, name=name)
    logger.info("Registered %d tools", len(dispatch))

    try:
        mcp.run(transport="stdio")
    finally:
        close_environment()


if __name__ == "__main__":
    main()
