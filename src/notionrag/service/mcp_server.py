"""FastMCP server exposing the rag-search tool over the Notion knowledge base."""

import logging
import os
import time

import click
from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.dependencies import get_http_headers
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from notionrag.constants import (
    DEFAULT_LIMIT,
    DEFAULT_NEIGHBOR_COUNT,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
    env_number,
)
from notionrag.errors import RagSearchError, StoreQueryFailure
from notionrag.rag.pipeline import RagPipeline, build_pipeline

logger = logging.getLogger(__name__)

SERVER_NAME = "Notion RAG Server"


def configure_logging() -> None:
    """Configure root logging from LOG_LEVEL; output goes to stderr."""
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class RequestLoggingMiddleware:
    """Log method, path, client address, status and duration of HTTP requests.

    Headers are not logged; the tenant header is a credential.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope["method"]
        path = scope["path"]
        client = scope.get("client")
        remote = f"{client[0]}:{client[1]}" if client else "unknown"
        status = 500
        start = time.perf_counter()
        logger.info(f"📥 {method} {path} from {remote}")

        async def send_with_status(message: Message) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_with_status)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(f"📤 {method} {path} -> {status} in {elapsed_ms:.1f}ms")


def http_middleware() -> list[Middleware]:
    """Middleware stack for the network transports."""
    return [Middleware(RequestLoggingMiddleware)]


async def rag_search_impl(
    pipeline: RagPipeline,
    query: str,
    limit: int = DEFAULT_LIMIT,
    neighbor_count: int = DEFAULT_NEIGHBOR_COUNT,
    tenant_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> str:
    """Run rag-search and translate pipeline errors into tool errors.

    Raises:
        ToolError: With a short, caller-facing message for every failure
    """
    try:
        return await pipeline.run(
            query,
            limit=limit,
            neighbor_count=neighbor_count,
            tenant_id=tenant_id,
            headers=headers,
        )
    except StoreQueryFailure as e:
        level = logging.WARNING if e.retryable else logging.ERROR
        logger.log(level, f"❌ MCP Tool: {e}")
        raise ToolError(str(e)) from e
    except RagSearchError as e:
        logger.warning(f"⚠️ MCP Tool: {e}")
        raise ToolError(str(e)) from e
    except Exception as e:
        error_msg = f"Unexpected error: {type(e).__name__}: {e}"
        logger.error(f"❌ MCP Tool: {error_msg}", exc_info=True)
        raise ToolError(error_msg) from e


def create_server(pipeline: RagPipeline) -> FastMCP:
    """Create the FastMCP server bound to a pipeline.

    Args:
        pipeline: The pipeline answering rag-search calls

    Returns:
        FastMCP: Server with the ``rag-search`` tool and a ``/health`` route
    """
    mcp = FastMCP(SERVER_NAME)

    @mcp.tool(name="rag-search")
    async def rag_search(
        query: str,
        limit: int = DEFAULT_LIMIT,
        neighbor_count: int = DEFAULT_NEIGHBOR_COUNT,
        tenant_id: str | None = None,
    ) -> str:
        """
        Search the knowledge base for relevant documents.

        Args:
            query: The search query to find relevant information.
            limit: The maximum number of documents to retrieve (default: 5).
            neighbor_count: Number of neighboring chunks to include on each
                side of a hit when sliding-window expansion is enabled (default: 2).
            tenant_id: The Tenant ID. Required if not provided via the
                X-Tenant-ID header (e.g. in stdio mode).
        """
        # Empty outside an HTTP request (stdio)
        headers = get_http_headers()
        return await rag_search_impl(
            pipeline,
            query,
            limit=limit,
            neighbor_count=neighbor_count,
            tenant_id=tenant_id,
            headers=headers,
        )

    @mcp.custom_route("/health", methods=["GET"])
    async def health(request: Request) -> PlainTextResponse:
        return PlainTextResponse("OK")

    return mcp


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse", "http"]),
    default="sse",
    show_default=True,
    help="Transport mode: 'stdio' for local clients, 'sse' or 'http' to serve over the network",
)
@click.option("--host", type=str, default=None, help="Bind address (default: HOST env or 0.0.0.0)")
@click.option("--port", type=int, default=None, help="Listen port (default: PORT env or 8080)")
def main(transport: str, host: str | None, port: int | None) -> None:
    """Entry point for the MCP server command-line interface."""
    load_dotenv()
    configure_logging()

    pipeline = build_pipeline()
    mcp = create_server(pipeline)

    try:
        if transport == "stdio":
            logger.info("🚀 Starting Notion RAG MCP Server in stdio mode...")
            mcp.run(transport="stdio")
            return

        host = host or os.getenv("HOST", DEFAULT_SERVER_HOST)
        port = port or env_number("PORT", DEFAULT_SERVER_PORT, int)
        logger.info(f"🚀 Starting Notion RAG MCP Server on {host}:{port} ({transport})...")
        mcp.run(transport=transport, host=host, port=port, middleware=http_middleware())
    finally:
        pipeline.close()


if __name__ == "__main__":
    main()
