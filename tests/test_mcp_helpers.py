"""Tests for MCP client helper functions."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from notionrag.service.mcp_helpers import call_mcp_tool, extract_mcp_text


def text_result(*texts: str) -> MagicMock:
    mock_result = MagicMock()
    mock_result.content = [MagicMock(type="text", text=text) for text in texts]
    return mock_result


def mock_mcp_client(result=None, enter_error=None) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.call_tool = AsyncMock(return_value=result)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client, side_effect=enter_error)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    return mock_client


class TestExtractMcpText:
    """Tests for extract_mcp_text function."""

    def test_returns_formatted_search_text(self):
        """Test that rag-search output comes back unchanged."""
        output = "---\nTitle: Refunds\nParent one\nSource: https://notion.so/1111#aaaa\n\n"

        assert extract_mcp_text(text_result(output)) == output

    def test_json_looking_text_is_not_parsed(self):
        assert extract_mcp_text(text_result('{"status": "ok"}')) == '{"status": "ok"}'

    def test_concatenates_text_blocks_and_skips_others(self):
        mock_result = text_result("first ", "second")
        mock_result.content.insert(1, MagicMock(type="image", data="..."))

        assert extract_mcp_text(mock_result) == "first second"

    @pytest.mark.parametrize("content", [[], None])
    def test_empty_content_gives_empty_text(self, content):
        mock_result = MagicMock()
        mock_result.content = content

        assert extract_mcp_text(mock_result) == ""


class TestCallMcpTool:
    """Tests for call_mcp_tool async function."""

    @pytest.mark.asyncio
    async def test_calls_rag_search(self):
        """Test calling rag-search with a tenant argument."""
        mock_client = mock_mcp_client(text_result("---\nchunk\n\n"))
        params = {"query": "refunds", "limit": 3, "tenant_id": "tenant-a"}

        with patch("notionrag.service.mcp_helpers.MCPClient", return_value=mock_client) as client_class:
            result = await call_mcp_tool("http://localhost:8080/sse", "rag-search", params)

        assert result == "---\nchunk\n\n"
        client_class.assert_called_once_with("http://localhost:8080/sse")
        mock_client.call_tool.assert_called_once_with("rag-search", params)

    @pytest.mark.asyncio
    async def test_defaults_to_empty_params(self):
        mock_client = mock_mcp_client(text_result("No relevant documents found."))

        with patch("notionrag.service.mcp_helpers.MCPClient", return_value=mock_client):
            result = await call_mcp_tool("http://localhost:8080/sse", "rag-search")

        assert result == "No relevant documents found."
        mock_client.call_tool.assert_called_once_with("rag-search", {})

    @pytest.mark.asyncio
    async def test_propagates_connection_errors(self):
        """Test that exceptions from the MCP client are propagated."""
        mock_client = mock_mcp_client(enter_error=ConnectionError("Server unavailable"))

        with patch("notionrag.service.mcp_helpers.MCPClient", return_value=mock_client):
            with pytest.raises(ConnectionError, match="Server unavailable"):
                await call_mcp_tool("http://localhost:8080/sse", "rag-search")
