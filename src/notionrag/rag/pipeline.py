"""The rag-search pipeline: tenant → embedding → search → expansion → links → text."""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from notionrag.constants import (
    DEFAULT_TENANT_HEADER,
    NO_RESULTS_MESSAGE,
    get_embedding_model,
    get_expansion_strategy,
    get_request_timeout,
    get_tenant_header,
)
from notionrag.embedding import EmbeddingService, get_embedding_service
from notionrag.errors import InvalidArgumentError, RequestTimeoutError
from notionrag.rag.context import RequestContext
from notionrag.rag.expansion import (
    ContextExpander,
    Expansion,
    coerce_neighbor_count,
    get_expander,
)
from notionrag.rag.formatter import ResultEntry, format_results
from notionrag.rag.links import build_deep_link
from notionrag.rag.models import SearchHit
from notionrag.rag.search import VectorSearchStage, coerce_limit
from notionrag.rag.tenant import resolve_tenant
from notionrag.service.database import DocumentRepository, create_document_store

logger = logging.getLogger(__name__)


def build_entry(hit: SearchHit, expansion: Expansion) -> ResultEntry:
    """Pair expanded text with the hit's title and deep link.

    A hit whose expansion fell back is shown as its bare content.
    """
    if expansion.fallback:
        return ResultEntry(text=expansion.text)
    return ResultEntry(text=expansion.text, title=hit.title, link=build_deep_link(hit.metadata))


class RagPipeline:
    """Answers one rag-search request at a time; instances are shared by requests.

    All collaborators are injected. The pipeline holds no per-request state;
    that lives in the ``RequestContext`` created by :meth:`run`.
    """

    def __init__(
        self,
        embedder: EmbeddingService,
        repository: DocumentRepository,
        expander: ContextExpander,
        embedding_model: str | None = None,
        request_timeout: float | None = None,
        tenant_header: str = DEFAULT_TENANT_HEADER,
    ) -> None:
        self.repository = repository
        self.expander = expander
        self.search_stage = VectorSearchStage(embedder, repository, embedding_model)
        self.request_timeout = request_timeout
        self.tenant_header = tenant_header

    async def run(
        self,
        query: str | None,
        limit: Any = None,
        neighbor_count: Any = None,
        tenant_id: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> str:
        """Run the full pipeline for one request.

        Args:
            query: Search text (required, non-blank)
            limit: Maximum number of results (≤ 0 or missing means 5)
            neighbor_count: Window radius for the window strategy (< 0 or missing means 2)
            tenant_id: Tenant argument, used only when the header is absent
            headers: Transport headers of the request

        Returns:
            str: The formatted results, or the no-results sentinel

        Raises:
            InvalidArgumentError: If the query is missing or blank
            UnauthorizedError: If no tenant can be resolved
            EmbeddingFailure: If the query cannot be embedded
            StoreQueryFailure: If the nearest-neighbor query fails
            RequestTimeoutError: If the request deadline passes
        """
        if not isinstance(query, str) or not query.strip():
            raise InvalidArgumentError("Invalid argument: 'query' is required and must not be empty.")

        tenant = resolve_tenant(headers, tenant_id, self.tenant_header)
        ctx = RequestContext(tenant_id=tenant, neighbor_count=coerce_neighbor_count(neighbor_count))
        effective_limit = coerce_limit(limit)
        logger.info(
            f"🔎 [{ctx.request_id}] rag-search tenant={tenant} limit={effective_limit} "
            f"strategy={type(self.expander).__name__} query='{query[:100]}'"
        )

        try:
            async with asyncio.timeout(self.request_timeout):
                hits = await self.search_stage.search(
                    query, effective_limit, ctx, child_only=self.expander.child_only
                )
                if not hits:
                    logger.info(f"📭 [{ctx.request_id}] No relevant documents found")
                    return NO_RESULTS_MESSAGE
                expansions = await self.expander.expand_all(hits, ctx)
        except TimeoutError:
            logger.error(f"❌ [{ctx.request_id}] Request timed out after {self.request_timeout}s")
            raise RequestTimeoutError(
                f"Request timed out after {self.request_timeout} seconds"
            ) from None
        finally:
            ctx.parent_cache.close()

        entries = [build_entry(hit, expansion) for hit, expansion in zip(hits, expansions)]
        logger.info(f"✅ [{ctx.request_id}] Returning {len(entries)} results")
        return format_results(entries)

    def close(self) -> None:
        """Release the store handle."""
        self.repository.close()


def build_pipeline(
    strategy: str | None = None,
    embedding_config: dict | None = None,
) -> RagPipeline:
    """Construct a pipeline from environment configuration.

    Args:
        strategy: Expansion strategy; defaults to EXPANSION_STRATEGY
        embedding_config: Passed to ``get_embedding_service``

    Returns:
        RagPipeline: A pipeline owning a fresh RavenDB DocumentStore
    """
    strategy = strategy or get_expansion_strategy()
    embedder = get_embedding_service(embedding_config)
    repository = DocumentRepository(create_document_store())
    expander = get_expander(strategy, repository)
    service = (embedding_config or {}).get("service")
    logger.info(f"🧩 Pipeline ready: strategy={strategy}")
    return RagPipeline(
        embedder=embedder,
        repository=repository,
        expander=expander,
        embedding_model=get_embedding_model(service),
        request_timeout=get_request_timeout(),
        tenant_header=get_tenant_header(),
    )
