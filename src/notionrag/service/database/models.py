"""Data models for documents stored in RavenDB."""

from dataclasses import dataclass, field
from typing import Any

from notionrag.service.database.utils import decode_metadata


@dataclass(eq=False)
class Document:
    """A stored content unit scoped to one tenant.

    Child chunks carry ``doc_type="child"`` and a ``parent_id`` in their
    metadata; parents carry ``doc_type="parent"``. Window-style chunks carry
    ``notion_page_id`` and ``chunk_index``.

    Note: eq=False ensures each instance is unique and hashable by identity,
    which is required for RavenDB's session entity tracking.

    Attributes:
        Id: RavenDB document ID
        content: The text content
        embedding: Vector embedding of the content
        tenant_id: Scoping key; every query filters on it
        metadata: doc_type, parent_id, chunk_index, notion_page_id,
            anchor_block_id, url, title
    """

    Id: str | None = None
    content: str = ""
    embedding: list[float] = field(default_factory=list)
    tenant_id: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def __hash__(self) -> int:
        """Hash by object identity for RavenDB session tracking."""
        return id(self)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Document":
        """Build a Document from a raw RavenDB result dict.

        Raises:
            ValueError: If the metadata field cannot be decoded
        """
        doc_id = row.get("Id") or row.get("@metadata", {}).get("@id")
        return cls(
            Id=doc_id,
            content=row.get("content") or "",
            embedding=row.get("embedding") or [],
            tenant_id=row.get("tenant_id") or "",
            metadata=decode_metadata(row.get("metadata")),
        )
