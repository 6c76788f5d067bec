"""
Tool Documentation Resources

Generates twist://tools/* resources directly from @mcp.tool docstrings.
Docstrings are the documentation; nothing is maintained twice.

Architecture Note:
    Registration reads FastMCP's internal `_tool_manager._tools` because the
    public `list_tools()` is async and server.py registers at import time.
    If that structure goes away, register_from_mcp() logs a warning and
    falls back to `list_tools()` (only possible with no running loop).
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

URI_PREFIX = "twist://tools/"


def docstring_to_markdown(tool_name: str, docstring: str, title: str | None = None) -> str:
    """
    Convert a tool's docstring to markdown.

    Docstrings are indented to match the function body; the common indent
    of every line after the first is stripped. The heading uses the tool's
    display title when it has one.
    """
    heading = f"# {title} (`{tool_name}`)" if title else f"# {tool_name}"
    if not docstring or not docstring.strip():
        return f"{heading}\n\nNo documentation available."

    lines = docstring.strip().split("\n")
    rest = [line for line in lines[1:] if line.strip()]
    indent = min((len(line) - len(line.lstrip()) for line in rest), default=0)
    body = [lines[0]] + [line[indent:] for line in lines[1:]]

    return f"{heading}\n\n" + "\n".join(body)


@dataclass
class ToolDoc:
    name: str
    docstring: str
    title: str | None = None

    @property
    def summary(self) -> str:
        """First docstring line, for listings."""
        first = self.docstring.strip().split("\n")[0] if self.docstring.strip() else ""
        return (first or "No description")[:100]


class ToolResourceRegistry:
    """Registry of twist://tools/{name} documentation resources."""

    def __init__(self) -> None:
        self._docs: dict[str, ToolDoc] = {}
        self._cache: dict[str, dict[str, str]] = {}

    def register(self, name: str, docstring: str | None, title: str | None = None) -> None:
        """Register (or replace) documentation for one tool."""
        self._docs[name] = ToolDoc(name, docstring or "", title)
        self._cache.pop(f"{URI_PREFIX}{name}", None)

    def _register_from_internals(self, mcp_server: Any) -> int:
        tools = getattr(getattr(mcp_server, "_tool_manager", None), "_tools", None)
        if not tools:
            return 0
        for name, tool in tools.items():
            annotations = getattr(tool, "annotations", None)
            title = getattr(tool, "title", None) or getattr(annotations, "title", None)
            docstring = tool.fn.__doc__ if hasattr(tool, "fn") else getattr(tool, "description", "")
            self.register(name, docstring, title)
        return len(tools)

    def _register_from_public_api(self, mcp_server: Any) -> int:
        async def _collect() -> int:
            tools = await mcp_server.list_tools()
            for tool in tools:
                title = getattr(tool.annotations, "title", None) if tool.annotations else None
                self.register(tool.name, tool.description, title)
            return len(tools)

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(_collect())
        logger.warning("Cannot list tools via public API: event loop already running")
        return 0

    def register_from_mcp(self, mcp_server: Any) -> None:
        """
        Register every tool of a FastMCP server.

        Args:
            mcp_server: FastMCP instance with its tools already decorated
        """
        count = self._register_from_internals(mcp_server)
        if count == 0:
            logger.warning(
                "Found 0 tools via FastMCP internals; trying the public list_tools() API"
            )
            count = self._register_from_public_api(mcp_server)

        if count == 0:
            logger.warning(
                "Tool resource registry is empty; twist://tools/* resources will not be available"
            )
            return

        logger.info(f"Tool resource registry: {count} tools registered")
        undocumented = sorted(name for name, doc in self._docs.items() if not doc.docstring.strip())
        if undocumented:
            logger.warning(f"Tools with empty docstrings: {', '.join(undocumented)}")

    def get_tool_names(self) -> set[str]:
        return set(self._docs)

    def get_resource(self, uri: str) -> dict[str, str]:
        """
        Get resource by URI.

        Args:
            uri: Resource URI (e.g., "twist://tools/mark-done")

        Returns:
            Resource dict with uri, mimeType, text

        Raises:
            KeyError: If the URI isn't a tool resource or the tool is unknown
        """
        if uri in self._cache:
            return self._cache[uri]
        if not uri.startswith(URI_PREFIX):
            raise KeyError(f"Not a tool resource: {uri}")

        tool_name = uri[len(URI_PREFIX):]
        if tool_name not in self._docs:
            raise KeyError(f"Tool not found: {tool_name}")

        doc = self._docs[tool_name]
        resource = {
            "uri": uri,
            "mimeType": "text/markdown",
            "text": docstring_to_markdown(doc.name, doc.docstring, doc.title),
        }
        self._cache[uri] = resource
        return resource

    def list_resources(self) -> list[dict[str, str]]:
        """List all tool resources, sorted by name."""
        return [
            {"uri": f"{URI_PREFIX}{name}", "name": name, "description": self._docs[name].summary}
            for name in sorted(self._docs)
        ]


# Global registry instance
_registry = ToolResourceRegistry()


def get_tool_registry() -> ToolResourceRegistry:
    """Get the global tool resource registry."""
    return _registry
