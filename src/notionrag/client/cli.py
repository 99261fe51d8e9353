"""Command-line interface for notionrag using Click."""

import asyncio
import logging

import click
from dotenv import load_dotenv
from fastmcp.exceptions import ToolError

from notionrag.constants import (
    DEFAULT_LIMIT,
    DEFAULT_LOCAL_MCP_URL,
    DEFAULT_NEIGHBOR_COUNT,
    EXPANSION_STRATEGIES,
)
from notionrag.errors import RagSearchError
from notionrag.rag.pipeline import build_pipeline
from notionrag.service.mcp_helpers import call_mcp_tool
from notionrag.service.mcp_server import configure_logging

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


async def run_local_search(
    query: str,
    tenant_id: str | None,
    limit: int,
    neighbor_count: int,
    strategy: str | None,
) -> str:
    """Run one query through a locally built pipeline."""
    pipeline = build_pipeline(strategy=strategy)
    try:
        return await pipeline.run(
            query, limit=limit, neighbor_count=neighbor_count, tenant_id=tenant_id
        )
    finally:
        pipeline.close()


@click.command()
@click.argument("query", type=str)
@click.option(
    "--tenant-id",
    type=str,
    envvar="TENANT_ID",
    default=None,
    help="Tenant whose documents are searched (default: TENANT_ID env)",
)
@click.option(
    "--limit",
    type=int,
    default=DEFAULT_LIMIT,
    help=f"Number of results to return (default: {DEFAULT_LIMIT})",
)
@click.option(
    "--neighbor-count",
    type=int,
    default=DEFAULT_NEIGHBOR_COUNT,
    help=f"Neighboring chunks per side for window expansion (default: {DEFAULT_NEIGHBOR_COUNT})",
)
@click.option(
    "--strategy",
    type=click.Choice(EXPANSION_STRATEGIES),
    default=None,
    help="Context expansion strategy (default: EXPANSION_STRATEGY env or 'hierarchical')",
)
@click.option(
    "--server-url",
    type=str,
    default=None,
    help=f"Query a running MCP server (e.g. {DEFAULT_LOCAL_MCP_URL}) instead of searching locally",
)
def search(
    query: str,
    tenant_id: str | None,
    limit: int,
    neighbor_count: int,
    strategy: str | None,
    server_url: str | None,
) -> None:
    """Search the knowledge base of one tenant.

    QUERY is the text to search for.

    Example:
        notionrag-search "refund policy" --tenant-id acme
        notionrag-search "onboarding" --tenant-id acme --strategy window --neighbor-count 1
        notionrag-search "pricing" --tenant-id acme --server-url http://localhost:8080/sse
    """
    configure_logging()
    click.echo(f"🔍 Searching for: '{query}'\n", err=True)

    try:
        if server_url:
            params = {"query": query, "limit": limit, "neighbor_count": neighbor_count}
            if tenant_id:
                params["tenant_id"] = tenant_id
            output = asyncio.run(call_mcp_tool(server_url, "rag-search", params))
        else:
            output = asyncio.run(
                run_local_search(query, tenant_id, limit, neighbor_count, strategy)
            )
    except (RagSearchError, ToolError) as e:
        click.echo(f"✗ {e}", err=True)
        raise click.Abort()
    except ConnectionError as e:
        click.echo(f"✗ Connection error: {e}", err=True)
        click.echo("\nPlease ensure the MCP server and RavenDB are running.", err=True)
        raise click.Abort()
    except Exception as e:
        click.echo(f"✗ Unexpected error: {e}", err=True)
        raise click.Abort()

    click.echo(output)


if __name__ == "__main__":
    search()
