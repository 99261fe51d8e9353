"""Factory function for creating embedding service instances."""

import logging
import os

from dotenv import load_dotenv

from notionrag.constants import DEFAULT_EMBEDDING_SERVICE, DEFAULT_OLLAMA_HOST
from notionrag.embedding.base import EmbeddingService
from notionrag.embedding.gemini import GeminiService
from notionrag.embedding.ollama import OllamaService
from notionrag.embedding.openai import OpenAIService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_embedding_service(config: dict | None = None) -> EmbeddingService:
    """Factory function to create an embedding service instance.

    Args:
        config: Optional configuration dictionary. If None, uses environment variables.
                Expected keys:
                - 'service': Service type (default: from EMBEDDING_SERVICE env, or "openai")
                - 'host': Ollama host URL (default: from OLLAMA_HOST env)
                - 'api_key': OpenAI API key (default: from OPENAI_API_KEY env)

    Returns:
        EmbeddingService: An instance implementing the EmbeddingService protocol.
    """
    if config is None:
        config = {}

    # Read service type from config, then env, then default to openai
    service_type = config.get("service", os.getenv("EMBEDDING_SERVICE", DEFAULT_EMBEDDING_SERVICE))

    if service_type == "openai":
        api_key = config.get("api_key", os.getenv("OPENAI_API_KEY"))
        if not api_key:
            logger.warning("⚠️ OPENAI_API_KEY is missing. RAG search will fail.")
        return OpenAIService(api_key=api_key)

    if service_type == "ollama":
        host = config.get("host", os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST))
        return OllamaService(host=host)

    if service_type == "gemini":
        return GeminiService()

    raise ValueError(f"Unsupported embedding service: {service_type}")
