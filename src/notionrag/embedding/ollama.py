"""Ollama embedding service for locally hosted models."""

import logging

import ollama

from notionrag.constants import get_embedding_model

logger = logging.getLogger(__name__)


class OllamaService:
    """Embeds text with a model served by a local Ollama daemon."""

    def __init__(self, host: str) -> None:
        self.host = host
        logger.info(f"🤖 Initializing OllamaService: host={host}")
        self.client = ollama.Client(host=host)

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Embed all texts in a single ``/api/embed`` request.

        Args:
            texts: Texts to embed
            model: Model name; defaults to EMBEDDING_MODEL or nomic-embed-text

        Returns:
            list[list[float]]: One vector per text, in input order
        """
        embedding_model = model or get_embedding_model("ollama")
        response = self.client.embed(model=embedding_model, input=texts)
        embeddings = [list(vector) for vector in response["embeddings"]]

        if len(embeddings) != len(texts):
            raise ValueError(
                f"Ollama returned {len(embeddings)} embeddings for {len(texts)} texts"
            )
        logger.debug(f"Embedded {len(texts)} texts with {embedding_model}")
        return embeddings
