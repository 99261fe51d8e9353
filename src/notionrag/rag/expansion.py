"""Context expansion: turn each search hit into the text shown to the caller.

Two strategies share the ``expand(hit, ctx) -> str`` contract:

- ``WindowExpander`` stitches together the chunks around the hit on the
  same page (``chunk_index`` within ``neighbor_count`` of the hit).
- ``HierarchicalExpander`` replaces a child chunk with its parent document,
  fetching each parent at most once per request.

Expansion never fails a request. When a hit cannot be expanded its own
content is used instead.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from notionrag.constants import (
    DEFAULT_NEIGHBOR_COUNT,
    STRATEGY_HIERARCHICAL,
    STRATEGY_WINDOW,
    WINDOW_JOINER,
)
from notionrag.errors import ExpansionFailure
from notionrag.rag.context import RequestContext
from notionrag.rag.models import SearchHit
from notionrag.service.database.operations import DocumentRepository
from notionrag.service.database.utils import normalize_chunk_index

logger = logging.getLogger(__name__)


def coerce_neighbor_count(neighbor_count: Any) -> int:
    """Effective window radius: missing, invalid or negative values become 2."""
    try:
        value = int(neighbor_count)
    except (TypeError, ValueError):
        return DEFAULT_NEIGHBOR_COUNT
    return value if value >= 0 else DEFAULT_NEIGHBOR_COUNT


@dataclass(frozen=True)
class Expansion:
    """Text shown for one hit.

    ``fallback`` is set when expansion failed and the hit's own content
    stands in for its context.
    """

    text: str
    fallback: bool = False


class ContextExpander(ABC):
    """Base class for expansion strategies."""

    #: Whether vector search should only consider child chunks
    child_only = False

    def __init__(self, repository: DocumentRepository) -> None:
        self.repository = repository

    @abstractmethod
    async def expand(self, hit: SearchHit, ctx: RequestContext) -> str:
        """Return the expanded text for one hit.

        Raises:
            ExpansionFailure: If no context can be produced for the hit
        """

    async def expand_or_fallback(self, hit: SearchHit, ctx: RequestContext) -> Expansion:
        try:
            return Expansion(await self.expand(hit, ctx))
        except Exception as e:
            logger.warning(
                f"⚠️ [{ctx.request_id}] Expansion failed for {hit.id}, "
                f"using chunk content: {type(e).__name__}: {e}"
            )
            return Expansion(hit.content, fallback=True)

    async def expand_all(self, hits: list[SearchHit], ctx: RequestContext) -> list[Expansion]:
        """Expand every hit concurrently; results follow the order of ``hits``."""
        return list(await asyncio.gather(*(self.expand_or_fallback(hit, ctx) for hit in hits)))


class WindowExpander(ContextExpander):
    """Sliding-window expansion over neighboring chunks of the same page."""

    async def expand(self, hit: SearchHit, ctx: RequestContext) -> str:
        page_id = hit.page_id
        index = hit.chunk_index
        if page_id is None or index is None:
            raise ExpansionFailure(f"hit {hit.id} has no notion_page_id/chunk_index")

        low = index - ctx.neighbor_count
        high = index + ctx.neighbor_count
        documents = await self.repository.window(ctx.tenant_id, page_id, low, high)

        chunks = []
        for document in documents:
            if document.tenant_id != ctx.tenant_id:
                continue
            try:
                chunk_index = normalize_chunk_index(document.metadata.get("chunk_index"))
            except ValueError:
                continue
            if low <= chunk_index <= high:
                chunks.append((chunk_index, document.content))

        if not chunks:
            raise ExpansionFailure(f"no chunks found around {page_id}[{index}]")

        chunks.sort(key=lambda chunk: chunk[0])
        logger.debug(
            f"[{ctx.request_id}] Window {page_id}[{low}..{high}] -> {len(chunks)} chunks"
        )
        return WINDOW_JOINER.join(content for _, content in chunks)


class HierarchicalExpander(ContextExpander):
    """Parent/child expansion: a child chunk is shown as its parent's content."""

    child_only = True

    async def expand(self, hit: SearchHit, ctx: RequestContext) -> str:
        if hit.doc_type == "parent":
            return hit.content

        parent_id = hit.parent_id
        if parent_id is None:
            raise ExpansionFailure(f"hit {hit.id} has no parent_id")

        parent = await ctx.parent_cache.get_or_fetch(
            parent_id, lambda: self.repository.get_document(ctx.tenant_id, parent_id)
        )
        if parent is None:
            raise ExpansionFailure(f"parent {parent_id} not found")
        if parent.tenant_id != ctx.tenant_id:
            raise ExpansionFailure(f"parent {parent_id} is outside the request tenant")
        return parent.content


def get_expander(strategy: str, repository: DocumentRepository) -> ContextExpander:
    """Create the expander for a configured strategy name.

    Raises:
        ValueError: If the strategy is unknown
    """
    if strategy == STRATEGY_HIERARCHICAL:
        return HierarchicalExpander(repository)
    if strategy == STRATEGY_WINDOW:
        return WindowExpander(repository)
    raise ValueError(f"Unsupported expansion strategy: {strategy}")
