"""Client-side helpers for calling tools on a running MCP server."""

import logging
from typing import Any

from fastmcp import Client as MCPClient

logger = logging.getLogger(__name__)


async def call_mcp_tool(
    server_url: str, tool_name: str, params: dict[str, Any] | None = None
) -> str:
    """Connect to an MCP server, call one tool and return its text output.

    Args:
        server_url: The MCP server URL (e.g., "http://localhost:8080/sse")
        tool_name: Name of the tool to call
        params: Tool arguments (default: none)

    Returns:
        str: The text content of the tool result

    Raises:
        ToolError: If the server reports the call as failed
        Exception: If the connection to the server fails
    """
    logger.debug(f"Calling {tool_name} on {server_url}")
    async with MCPClient(server_url) as client:
        result = await client.call_tool(tool_name, params or {})
    return extract_mcp_text(result)


def extract_mcp_text(result: Any) -> str:
    """Concatenate the text blocks of a CallToolResult.

    Non-text blocks (images, embedded resources) are skipped.
    """
    content = getattr(result, "content", None)
    if not content:
        return ""
    return "".join(block.text for block in content if getattr(block, "type", "text") == "text")
