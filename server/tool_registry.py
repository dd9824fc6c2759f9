"""Decorator-based tool registration.

Wraps ``FastMCP.tool()`` so each tool module can count and list the tools it
registered.

Usage:
    def register_tools(server: FastMCP, context: BillcomContext) -> int:
        registry = ToolRegistry(server)

        @registry.tool()
        async def search_vendors(...) -> str:
            ...

        return registry.count
"""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fastmcp import FastMCP

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Tracks tools registered on a FastMCP server."""

    def __init__(self, server: "FastMCP"):
        self.server = server
        self.tools: list[str] = []

    def tool(self, **kwargs: Any) -> Callable[[Callable], Callable]:
        """Register a function as a tool. All kwargs go to ``server.tool()``."""

        def decorator(func: Callable) -> Callable:
            registered = self.server.tool(**kwargs)(func)
            name = kwargs.get("name", func.__name__)
            self.tools.append(name)
            logger.debug(f"Registered tool {name}")
            return registered

        return decorator

    @property
    def count(self) -> int:
        return len(self.tools)

    def __len__(self) -> int:
        return self.count

    def __contains__(self, name: str) -> bool:
        return name in self.tools
