"""Retrieval service: MCP server and document store access."""
