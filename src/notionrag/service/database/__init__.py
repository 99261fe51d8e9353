"""Database configuration and connection management for RavenDB.

This package provides a unified interface for RavenDB access:
- Configuration management (RavenDBConfig)
- Document store creation
- Tenant-scoped, bounded-concurrency queries (DocumentRepository)

Usage:
    from notionrag.service.database import (
        DocumentRepository,
        create_document_store,
    )
"""

# Re-export public API
from notionrag.service.database.config import RavenDBConfig
from notionrag.service.database.models import Document
from notionrag.service.database.operations import (
    DocumentRepository,
    create_document_store,
    row_distance,
)
from notionrag.service.database.utils import cosine_distance, cosine_similarity, decode_metadata

__all__ = [
    # Config
    "RavenDBConfig",
    # Models
    "Document",
    # Operations
    "create_document_store",
    "DocumentRepository",
    "row_distance",
    # Utils
    "cosine_similarity",
    "cosine_distance",
    "decode_metadata",
]
