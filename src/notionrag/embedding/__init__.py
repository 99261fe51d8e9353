"""Embedding service abstraction layer for notionrag.

This package provides a unified interface for multiple embedding providers:
- OpenAIService: OpenAI embeddings API (default)
- OllamaService: Local models via Ollama
- GeminiService: Google Gemini API

Usage:
    from notionrag.embedding import get_embedding_service

    # Create service from environment config
    service = get_embedding_service()

    # Or with explicit config
    service = get_embedding_service({"service": "ollama", "host": "http://localhost:11434"})
"""

from notionrag.embedding.base import EmbeddingService
from notionrag.embedding.factory import get_embedding_service
from notionrag.embedding.gemini import GeminiService
from notionrag.embedding.ollama import OllamaService
from notionrag.embedding.openai import OpenAIService

__all__ = [
    "EmbeddingService",
    "GeminiService",
    "OllamaService",
    "OpenAIService",
    "get_embedding_service",
]
