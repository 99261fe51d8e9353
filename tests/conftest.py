"""Shared fixtures: in-memory doubles, document rows and a live RavenDB store."""

from typing import Any

import pytest
import requests

from fakes import FakeEmbedder, FakeRepository
from notionrag.errors import StoreQueryFailure
from notionrag.rag.context import RequestContext
from notionrag.service.database import RavenDBConfig, create_document_store


def ravendb_available() -> bool:
    """Whether a RavenDB server answers at RAVENDB_URL."""
    try:
        response = requests.get(f"{RavenDBConfig.get_url()}/build/version", timeout=2)
    except requests.RequestException:
        return False
    # 401 means a secured server is up
    return response.status_code in (200, 401)


@pytest.fixture
def ravendb_store():
    """Initialized DocumentStore for integration tests; skipped without a server."""
    if not ravendb_available():
        pytest.skip(f"RavenDB server not running at {RavenDBConfig.get_url()}")

    store = create_document_store()
    yield store
    store.close()


@pytest.fixture
def mock_embedding():
    """Provide a simple mock embedding vector.

    Returns:
        List of floats representing an embedding vector
    """
    return [0.1, 0.2, 0.3, 0.15, -0.1, 0.05, 0.25, -0.05]


@pytest.fixture
def fake_embedder(mock_embedding):
    return FakeEmbedder(vector=mock_embedding)


@pytest.fixture
def fake_repository():
    return FakeRepository()


@pytest.fixture
def request_context():
    return RequestContext(tenant_id="tenant-a", request_id="test0001")


@pytest.fixture
def store_failure():
    return StoreQueryFailure("Database query failed: connection refused")


# Test data generators
@pytest.fixture
def create_test_document():
    """Factory fixture to create stored document rows.

    Returns:
        Function that creates a row dict with custom parameters
    """

    def _create_document(
        doc_id: str = "documents/1-A",
        content: str = "Test chunk text",
        tenant_id: str = "tenant-a",
        distance: float = 0.1,
        **metadata: Any,
    ) -> dict:
        return {
            "Id": doc_id,
            "content": content,
            "tenant_id": tenant_id,
            "distance": distance,
            "embedding": [0.1, 0.2, 0.3],
            "metadata": metadata,
        }

    return _create_document
