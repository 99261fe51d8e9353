"""Transient models passed between pipeline stages."""

from dataclasses import dataclass, field
from typing import Any

from notionrag.errors import PartialDecodeError
from notionrag.service.database.utils import decode_metadata, normalize_chunk_index


def metadata_text(metadata: dict[str, Any], key: str) -> str | None:
    """Return a non-empty string metadata value, or None."""
    value = metadata.get(key)
    if isinstance(value, str) and value:
        return value
    return None


@dataclass(frozen=True)
class SearchHit:
    """One nearest-neighbor result, decoded from a store row.

    Attributes:
        id: Document id in the store
        content: Chunk text
        distance: Cosine distance from the query (smaller is closer)
        tenant_id: Tenant that owns the document
        metadata: Decoded metadata mapping
    """

    id: str | None
    content: str
    distance: float
    tenant_id: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def doc_type(self) -> str | None:
        return metadata_text(self.metadata, "doc_type")

    @property
    def parent_id(self) -> str | None:
        return metadata_text(self.metadata, "parent_id")

    @property
    def page_id(self) -> str | None:
        return metadata_text(self.metadata, "notion_page_id")

    @property
    def block_id(self) -> str | None:
        return metadata_text(self.metadata, "anchor_block_id")

    @property
    def title(self) -> str | None:
        return metadata_text(self.metadata, "title")

    @property
    def chunk_index(self) -> int | None:
        # Validated by from_row
        return self.metadata.get("chunk_index")

    @classmethod
    def from_row(cls, row: Any) -> "SearchHit":
        """Decode a raw vector-search row.

        Args:
            row: A result dict as returned by DocumentRepository.nearest

        Returns:
            SearchHit: The decoded hit

        Raises:
            PartialDecodeError: If the row is not a usable result
        """
        if not isinstance(row, dict):
            raise PartialDecodeError(f"row is not an object: {type(row).__name__}")

        doc_id = row.get("Id") or (row.get("@metadata") or {}).get("@id")

        content = row.get("content")
        if not isinstance(content, str):
            raise PartialDecodeError(f"row {doc_id} has no text content")

        tenant_id = row.get("tenant_id")
        if not isinstance(tenant_id, str) or not tenant_id:
            raise PartialDecodeError(f"row {doc_id} has no tenant_id")

        try:
            metadata = dict(decode_metadata(row.get("metadata")))
        except ValueError as e:
            raise PartialDecodeError(f"row {doc_id} has malformed metadata: {e}") from e

        if "chunk_index" in metadata and metadata["chunk_index"] is not None:
            raw_index = metadata["chunk_index"]
            try:
                metadata["chunk_index"] = normalize_chunk_index(raw_index)
            except ValueError as e:
                raise PartialDecodeError(
                    f"row {doc_id} has invalid chunk_index: {raw_index!r}"
                ) from e

        try:
            distance = float(row.get("distance", 0.0))
        except (TypeError, ValueError) as e:
            raise PartialDecodeError(f"row {doc_id} has invalid distance") from e
        if distance != distance or distance < 0:
            raise PartialDecodeError(f"row {doc_id} has invalid distance: {distance}")

        return cls(
            id=doc_id,
            content=content,
            distance=distance,
            tenant_id=tenant_id,
            metadata=metadata,
        )
