"""Per-request state threaded through every pipeline stage."""

import asyncio
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from notionrag.constants import DEFAULT_NEIGHBOR_COUNT
from notionrag.service.database.models import Document


class ParentCache:
    """Parent documents fetched during one request, keyed by parent id.

    The cache stores the fetch task rather than its result, so hits that are
    expanded concurrently and share a parent still trigger a single fetch.
    A failed fetch stays cached and every hit of that parent falls back.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task] = {}

    def __contains__(self, parent_id: str) -> bool:
        return parent_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    async def get_or_fetch(
        self, parent_id: str, fetch: Callable[[], Awaitable[Document | None]]
    ) -> Document | None:
        task = self._tasks.get(parent_id)
        if task is None:
            task = asyncio.ensure_future(fetch())
            self._tasks[parent_id] = task
        return await task

    def close(self) -> None:
        """Cancel fetches still running and drop every entry."""
        for task in self._tasks.values():
            if not task.done():
                task.cancel()
        self._tasks.clear()


@dataclass
class RequestContext:
    """Explicit record of one rag-search request.

    Attributes:
        tenant_id: Resolved tenant; every store query is scoped to it
        neighbor_count: Window radius for the window expansion strategy
        request_id: Short id used to correlate log lines
        parent_cache: Parent documents fetched for this request only
    """

    tenant_id: str
    neighbor_count: int = DEFAULT_NEIGHBOR_COUNT
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    parent_cache: ParentCache = field(default_factory=ParentCache)
