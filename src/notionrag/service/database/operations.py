"""Database operations for RavenDB - store creation and tenant-scoped queries."""

import asyncio
import logging
import math
from collections.abc import Callable
from typing import Any, TypeVar

from ravendb import DocumentStore

from notionrag.errors import StoreQueryFailure
from notionrag.service.database.config import RavenDBConfig
from notionrag.service.database.models import Document
from notionrag.service.database.utils import cosine_distance, cosine_similarity

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_document_store(url: str | None = None, database: str | None = None) -> DocumentStore:
    """Create and initialize a DocumentStore instance.

    Args:
        url: RavenDB server URL (defaults to value from RavenDBConfig.get_url())
        database: Database name (defaults to value from RavenDBConfig.get_database_name())

    Returns:
        DocumentStore: Initialized DocumentStore instance
    """
    if url is None:
        url = RavenDBConfig.get_url()
    if database is None:
        database = RavenDBConfig.get_database_name()

    store = DocumentStore([url], database)
    store.initialize()
    return store


def row_distance(row: dict[str, Any], query_embedding: list[float]) -> float:
    """Cosine distance of a vector-search result row from the query.

    Uses the similarity RavenDB reports in ``@index-score`` and falls back to
    computing it from the stored embedding.
    """
    metadata = row.get("@metadata") or {}
    index_score = metadata.get("@index-score")
    if index_score is not None:
        return cosine_distance(float(index_score))
    result_embedding = row.get("embedding") or []
    return cosine_distance(cosine_similarity(query_embedding, result_embedding))


class DocumentRepository:
    """Tenant-scoped, read-only access to the document collection.

    Every query filters on ``tenant_id``. The blocking RavenDB client runs in
    worker threads, and at most ``max_connections`` operations are in flight
    at once. A caller that cannot get a slot within ``acquire_timeout``
    seconds receives a retryable ``StoreQueryFailure``.
    """

    def __init__(
        self,
        store: DocumentStore,
        collection: str | None = None,
        max_connections: int | None = None,
        acquire_timeout: float | None = None,
    ) -> None:
        self.store = store
        self.collection = collection or RavenDBConfig.get_collection()
        self.max_connections = max_connections or RavenDBConfig.get_max_connections()
        self.acquire_timeout = acquire_timeout or RavenDBConfig.get_acquire_timeout()
        self.vector_candidates = RavenDBConfig.get_vector_candidates()
        self._slots = asyncio.Semaphore(self.max_connections)
        logger.info(
            f"🗄️  DocumentRepository ready: collection={self.collection}, "
            f"max_connections={self.max_connections}"
        )

    async def _run(self, operation: Callable[[], T], description: str) -> T:
        """Run a blocking store operation inside a bounded slot.

        The slot is held until the worker thread finishes, even when the
        awaiting request is cancelled first.
        """
        try:
            async with asyncio.timeout(self.acquire_timeout):
                await self._slots.acquire()
        except TimeoutError:
            logger.warning(f"⚠️ Store busy: no free slot for {description}")
            raise StoreQueryFailure(
                "Database query failed: connection pool exhausted, please retry",
                retryable=True,
            ) from None

        worker = asyncio.ensure_future(asyncio.to_thread(operation))
        worker.add_done_callback(self._release_slot)
        try:
            return await asyncio.shield(worker)
        except asyncio.CancelledError:
            logger.debug(f"{description} abandoned; slot held until the worker returns")
            raise
        except Exception as e:
            raise StoreQueryFailure(f"Database query failed: {e}") from e

    def _release_slot(self, worker: asyncio.Future) -> None:
        self._slots.release()
        # Mark the outcome as retrieved when nobody awaits it any more
        if not worker.cancelled():
            worker.exception()

    async def nearest(
        self,
        tenant_id: str,
        query_embedding: list[float],
        limit: int,
        child_only: bool = False,
    ) -> list[dict[str, Any]]:
        """Find the tenant's documents closest to a query vector.

        Args:
            tenant_id: Tenant whose documents are searched
            query_embedding: Query vector
            limit: Maximum number of rows
            child_only: Restrict to ``metadata.doc_type == "child"``

        Returns:
            list[dict]: Raw result rows ordered by ascending cosine distance,
                each annotated with a ``distance`` key.
        """
        clauses = ["tenant_id = $tenant"]
        if child_only:
            clauses.append("metadata.doc_type = 'child'")
        # RavenDB considers only 16 candidates unless told otherwise
        candidates = max(int(limit), self.vector_candidates)
        clauses.append(f"vector.search(embedding, $vector, 0.0, {candidates})")
        rql = f'from "{self.collection}" where {" and ".join(clauses)} limit {int(limit)}'

        def query() -> list[dict[str, Any]]:
            with self.store.open_session() as session:
                raw = session.advanced.raw_query(rql, object_type=dict)
                raw.add_parameter("tenant", tenant_id)
                raw.add_parameter("vector", query_embedding)
                return list(raw)

        rows = await self._run(query, "vector search")

        for row in rows:
            if isinstance(row, dict):
                row["distance"] = row_distance(row, query_embedding)

        def sort_key(row: Any) -> float:
            if isinstance(row, dict):
                return row["distance"]
            return math.inf

        return sorted(rows, key=sort_key)[:limit]

    async def window(
        self, tenant_id: str, page_id: str, low: int, high: int
    ) -> list[Document]:
        """Fetch the chunks of one page whose ``chunk_index`` is in [low, high].

        Returns:
            list[Document]: Chunks ordered by ascending ``chunk_index``
        """
        rql = (
            f'from "{self.collection}" '
            "where tenant_id = $tenant and metadata.notion_page_id = $page "
            "and metadata.chunk_index between $low and $high "
            "order by metadata.chunk_index as long"
        )

        def query() -> list[Document]:
            with self.store.open_session() as session:
                raw = session.advanced.raw_query(rql, object_type=dict)
                raw.add_parameter("tenant", tenant_id)
                raw.add_parameter("page", page_id)
                raw.add_parameter("low", low)
                raw.add_parameter("high", high)
                return [Document.from_row(row) for row in raw]

        return await self._run(query, f"window {page_id}[{low}..{high}]")

    async def get_document(self, tenant_id: str, doc_id: str) -> Document | None:
        """Fetch a single document of the tenant by id.

        Returns:
            Document | None: The document, or None if the tenant has no such id
        """
        rql = f'from "{self.collection}" where id() = $id and tenant_id = $tenant'

        def query() -> Document | None:
            with self.store.open_session() as session:
                raw = session.advanced.raw_query(rql, object_type=dict)
                raw.add_parameter("id", doc_id)
                raw.add_parameter("tenant", tenant_id)
                rows = list(raw)
            if not rows:
                return None
            return Document.from_row(rows[0])

        return await self._run(query, f"document {doc_id}")

    def close(self) -> None:
        """Release the underlying DocumentStore."""
        self.store.close()
