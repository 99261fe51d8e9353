"""OpenAI embedding service implementation."""

import logging

import openai

from notionrag.constants import get_embedding_model

logger = logging.getLogger(__name__)


class OpenAIService:
    """OpenAI embedding service implementation.

    Uses the embeddings endpoint (text-embedding-3-small by default,
    1536 dimensions). The SDK client is created lazily so a server started
    without OPENAI_API_KEY comes up and reports the problem per request
    instead of refusing to boot.
    """

    def __init__(self, api_key: str | None = None) -> None:
        """Initialize the OpenAI service.

        Args:
            api_key: OpenAI API key. If None, the SDK reads OPENAI_API_KEY.
        """
        logger.info("🤖 Initializing OpenAIService")
        self.api_key = api_key
        self._client: openai.OpenAI | None = None

    @property
    def client(self) -> openai.OpenAI:
        """The OpenAI SDK client, created on first use."""
        if self._client is None:
            self._client = openai.OpenAI(api_key=self.api_key)
        return self._client

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Generate embeddings for a list of texts using OpenAI.

        Args:
            texts: List of text strings to embed
            model: Optional embedding model name. If None, uses EMBEDDING_MODEL env var
                   or service-specific default.

        Returns:
            list[list[float]]: List of embedding vectors, in input order
        """
        embedding_model = model or get_embedding_model("openai")
        response = self.client.embeddings.create(model=embedding_model, input=texts)
        items = sorted(response.data, key=lambda item: item.index)
        embeddings = [list(item.embedding) for item in items]

        logger.debug(f"✅ Generated {len(embeddings)} embeddings with {embedding_model}")
        return embeddings
