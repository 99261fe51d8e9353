"""Base protocol for embedding services."""

from typing import Protocol


class EmbeddingService(Protocol):
    """Protocol defining the interface for embedding services.

    This protocol ensures type safety and allows for multiple embedding
    provider implementations while maintaining a consistent interface.
    Implementations are synchronous and safe to share between requests;
    the retrieval pipeline calls them from worker threads.
    """

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Generate embeddings for a list of texts.

        Args:
            texts: List of text strings to embed
            model: Optional embedding model name. If None, uses a default for the service.

        Returns:
            list[list[float]]: List of embedding vectors
        """
        ...
