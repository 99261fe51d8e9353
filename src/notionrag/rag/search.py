"""Vector search stage: embed the query and fetch the tenant's nearest chunks."""

import asyncio
import logging
from typing import Any

from notionrag.constants import DEFAULT_LIMIT
from notionrag.embedding.base import EmbeddingService
from notionrag.errors import EmbeddingFailure, PartialDecodeError
from notionrag.rag.context import RequestContext
from notionrag.rag.models import SearchHit
from notionrag.service.database.operations import DocumentRepository

logger = logging.getLogger(__name__)


def coerce_limit(limit: Any) -> int:
    """Effective result limit: any missing, invalid or non-positive value becomes 5."""
    try:
        value = int(limit)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT
    return value if value > 0 else DEFAULT_LIMIT


def decode_hits(rows: list[Any], ctx: RequestContext) -> list[SearchHit]:
    """Decode result rows, dropping the ones that fail or belong to another tenant.

    Row order is kept.
    """
    hits = []
    for position, row in enumerate(rows):
        try:
            hit = SearchHit.from_row(row)
        except PartialDecodeError as e:
            logger.warning(f"⚠️ [{ctx.request_id}] Dropping result row {position}: {e}")
            continue
        if hit.tenant_id != ctx.tenant_id:
            logger.warning(
                f"⚠️ [{ctx.request_id}] Dropping result row {position}: "
                f"document {hit.id} is outside the request tenant"
            )
            continue
        hits.append(hit)
    return hits


class VectorSearchStage:
    """Runs the tenant-scoped nearest-neighbor query for a request."""

    def __init__(
        self,
        embedder: EmbeddingService,
        repository: DocumentRepository,
        embedding_model: str | None = None,
    ) -> None:
        self.embedder = embedder
        self.repository = repository
        self.embedding_model = embedding_model

    async def embed(self, query: str, ctx: RequestContext) -> list[float]:
        """Embed the raw query text.

        Raises:
            EmbeddingFailure: If the service errors or returns no vector
        """
        try:
            embeddings = await asyncio.to_thread(
                self.embedder.generate_embeddings, [query], self.embedding_model
            )
        except Exception as e:
            logger.error(f"❌ [{ctx.request_id}] Embedding failed: {type(e).__name__}: {e}")
            raise EmbeddingFailure(f"Failed to generate embedding: {e}") from e

        if not embeddings or not embeddings[0]:
            logger.error(f"❌ [{ctx.request_id}] Embedding service returned no vector")
            raise EmbeddingFailure("Failed to generate embedding: empty response")
        return list(embeddings[0])

    async def search(
        self, query: str, limit: int, ctx: RequestContext, child_only: bool = False
    ) -> list[SearchHit]:
        """Return the request's hits in ascending distance order.

        Raises:
            EmbeddingFailure: If the query cannot be embedded
            StoreQueryFailure: If the nearest-neighbor query fails
        """
        vector = await self.embed(query, ctx)
        rows = await self.repository.nearest(ctx.tenant_id, vector, limit, child_only=child_only)
        hits = decode_hits(rows, ctx)
        logger.info(
            f"🔍 [{ctx.request_id}] Vector search returned {len(rows)} rows, "
            f"{len(hits)} usable hits"
        )
        return hits
