"""Tests for the CLI module."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner
from fastmcp.exceptions import ToolError

from notionrag.client.cli import search
from notionrag.constants import DEFAULT_LOCAL_MCP_URL
from notionrag.errors import UnauthorizedError


@pytest.fixture
def local_pipeline():
    """Patch build_pipeline with a pipeline whose run() is an AsyncMock."""
    pipeline = MagicMock()
    pipeline.run = AsyncMock(return_value="---\nTitle: Refunds\nParent one\n\n")
    with patch("notionrag.client.cli.build_pipeline", return_value=pipeline) as mock_build:
        yield pipeline, mock_build


class TestSearchCLI:
    """Tests for the search CLI command."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_local_search(self, local_pipeline):
        """Test a local search prints the formatted results."""
        pipeline, mock_build = local_pipeline

        result = self.runner.invoke(
            search, ["refund policy", "--tenant-id", "acme", "--limit", "3", "--strategy", "window"]
        )

        assert result.exit_code == 0, result.output
        assert "Searching for: 'refund policy'" in result.output
        assert "Title: Refunds" in result.output
        mock_build.assert_called_once_with(strategy="window")
        pipeline.run.assert_awaited_once_with(
            "refund policy", limit=3, neighbor_count=2, tenant_id="acme"
        )
        pipeline.close.assert_called_once()

    def test_tenant_from_environment(self, local_pipeline):
        pipeline, _ = local_pipeline

        result = self.runner.invoke(search, ["pricing"], env={"TENANT_ID": "from-env"})

        assert result.exit_code == 0, result.output
        assert pipeline.run.await_args.kwargs["tenant_id"] == "from-env"

    def test_missing_tenant_aborts(self, local_pipeline):
        """Test that an unauthorized search reports the error and exits non-zero."""
        pipeline, _ = local_pipeline
        pipeline.run.side_effect = UnauthorizedError(
            "Unauthorized: Missing tenant_id. Must be provided via X-Tenant-ID header "
            "or 'tenant_id' argument."
        )

        result = self.runner.invoke(search, ["pricing"], env={"TENANT_ID": ""})

        assert result.exit_code == 1
        assert "✗ Unauthorized: Missing tenant_id" in result.output
        pipeline.close.assert_called_once()

    def test_unexpected_error_aborts(self, local_pipeline):
        pipeline, _ = local_pipeline
        pipeline.run.side_effect = RuntimeError("boom")

        result = self.runner.invoke(search, ["pricing", "--tenant-id", "acme"])

        assert result.exit_code == 1
        assert "✗ Unexpected error: boom" in result.output

    def test_rejects_unknown_strategy(self):
        result = self.runner.invoke(search, ["pricing", "--strategy", "graph"])

        assert result.exit_code == 2

    @patch("notionrag.client.cli.call_mcp_tool", new_callable=AsyncMock)
    def test_remote_search(self, mock_call_tool):
        """Test that --server-url sends rag-search to a running server."""
        mock_call_tool.return_value = "No relevant documents found."

        result = self.runner.invoke(
            search,
            ["pricing", "--tenant-id", "acme", "--server-url", "http://localhost:8080/sse"],
        )

        assert result.exit_code == 0, result.output
        assert "No relevant documents found." in result.output
        mock_call_tool.assert_awaited_once_with(
            "http://localhost:8080/sse",
            "rag-search",
            {"query": "pricing", "limit": 5, "neighbor_count": 2, "tenant_id": "acme"},
        )

    @patch("notionrag.client.cli.call_mcp_tool", new_callable=AsyncMock)
    def test_remote_search_without_tenant_omits_argument(self, mock_call_tool):
        """Test that the server is left to resolve the tenant from its own header."""
        mock_call_tool.return_value = "---\nchunk\n\n"

        result = self.runner.invoke(
            search, ["pricing", "--server-url", "http://localhost:8080/sse"], env={"TENANT_ID": ""}
        )

        assert result.exit_code == 0, result.output
        assert "tenant_id" not in mock_call_tool.await_args.args[2]

    @patch("notionrag.client.cli.call_mcp_tool", new_callable=AsyncMock)
    def test_remote_connection_error(self, mock_call_tool):
        mock_call_tool.side_effect = ConnectionError("Connection refused")

        result = self.runner.invoke(
            search, ["pricing", "--server-url", "http://localhost:9999/sse"]
        )

        assert result.exit_code == 1
        assert "✗ Connection error: Connection refused" in result.output
        assert "Please ensure the MCP server and RavenDB are running." in result.output

    @patch("notionrag.client.cli.call_mcp_tool", new_callable=AsyncMock)
    def test_remote_tool_error_is_reported(self, mock_call_tool):
        """Test that a server-side rag-search failure is shown to the user."""
        mock_call_tool.side_effect = ToolError("Failed to generate embedding: quota")

        result = self.runner.invoke(
            search, ["pricing", "--tenant-id", "acme", "--server-url", "http://localhost:8080/sse"]
        )

        assert result.exit_code == 1
        assert "✗ Failed to generate embedding: quota" in result.output

    def test_help_shows_default_server_url(self):
        result = self.runner.invoke(search, ["--help"])

        assert result.exit_code == 0
        assert DEFAULT_LOCAL_MCP_URL in result.output
