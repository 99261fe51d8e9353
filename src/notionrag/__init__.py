"""notionrag: tenant-scoped retrieval over Notion pages, served as an MCP tool."""

__version__ = "0.1.0"
