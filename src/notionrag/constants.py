"""Application-wide constants and defaults for notionrag.

This module provides a single source of truth for configuration defaults,
magic numbers, and other constants used throughout the application.
"""

import logging
import os

logger = logging.getLogger(__name__)

# =============================================================================
# Tool Defaults
# =============================================================================
DEFAULT_LIMIT = 5  # Default number of hits returned by vector search
DEFAULT_NEIGHBOR_COUNT = 2  # Chunks fetched on each side of a hit (window strategy)
DEFAULT_REQUEST_TIMEOUT = 30.0  # Seconds allowed for one rag-search request

NO_RESULTS_MESSAGE = "No relevant documents found."
RESULT_SEPARATOR = "---"
WINDOW_JOINER = "\n\n"

# =============================================================================
# Tenant Scoping
# =============================================================================
DEFAULT_TENANT_HEADER = "X-Tenant-ID"

# =============================================================================
# Context Expansion
# =============================================================================
STRATEGY_HIERARCHICAL = "hierarchical"
STRATEGY_WINDOW = "window"
EXPANSION_STRATEGIES = (STRATEGY_HIERARCHICAL, STRATEGY_WINDOW)
DEFAULT_EXPANSION_STRATEGY = STRATEGY_HIERARCHICAL

# =============================================================================
# Deep Links
# =============================================================================
NOTION_BASE_URL = "https://notion.so"

# =============================================================================
# Default URLs and Hosts
# =============================================================================
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_LOCAL_MCP_URL = "http://localhost:8080/sse"
DEFAULT_RAVENDB_URL = "http://localhost:8080"
DEFAULT_RAVENDB_DATABASE = "notionrag"
DEFAULT_RAVENDB_COLLECTION = "Documents"
DEFAULT_SERVER_HOST = "0.0.0.0"
DEFAULT_SERVER_PORT = 8080

# =============================================================================
# Store Connection Bounds
# =============================================================================
DEFAULT_MAX_CONNECTIONS = 20
DEFAULT_ACQUIRE_TIMEOUT = 10.0  # Seconds to wait for a free store slot
DEFAULT_VECTOR_CANDIDATES = 100  # Nearest-neighbor candidates considered per vector query

# =============================================================================
# Embedding Model Defaults
# =============================================================================
EMBEDDING_DEFAULTS = {
    "openai": "text-embedding-3-small",
    "ollama": "nomic-embed-text",
    "gemini": "text-embedding-004",
}
DEFAULT_EMBEDDING_SERVICE = "openai"


def get_embedding_model(service: str | None = None) -> str:
    """Get the default embedding model for a given embedding service.

    Checks the EMBEDDING_MODEL environment variable first, then falls back
    to service-specific defaults.

    Args:
        service: The embedding service name ("openai", "ollama" or "gemini").
                If None, uses EMBEDDING_SERVICE env var or defaults to "openai".

    Returns:
        str: The embedding model name to use.
    """
    # Environment variable takes precedence
    env_model = os.getenv("EMBEDDING_MODEL")
    if env_model:
        return env_model

    # Determine service if not provided
    if service is None:
        service = os.getenv("EMBEDDING_SERVICE", DEFAULT_EMBEDDING_SERVICE)

    # Return service-specific default
    return EMBEDDING_DEFAULTS.get(service, EMBEDDING_DEFAULTS[DEFAULT_EMBEDDING_SERVICE])


def get_expansion_strategy() -> str:
    """Get the configured context expansion strategy.

    Returns:
        str: "hierarchical" or "window"

    Raises:
        ValueError: If EXPANSION_STRATEGY names an unknown strategy
    """
    strategy = os.getenv("EXPANSION_STRATEGY", DEFAULT_EXPANSION_STRATEGY).strip().lower()
    if strategy not in EXPANSION_STRATEGIES:
        raise ValueError(
            f"Unsupported expansion strategy: {strategy} "
            f"(expected one of {', '.join(EXPANSION_STRATEGIES)})"
        )
    return strategy


def get_tenant_header() -> str:
    """Get the name of the transport header carrying the tenant id."""
    return os.getenv("TENANT_HEADER") or DEFAULT_TENANT_HEADER


def get_request_timeout() -> float:
    """Get the per-request deadline in seconds from REQUEST_TIMEOUT."""
    return env_number("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float)


def env_number(name: str, default, cast=int):
    """Read a positive number from the environment.

    Falls back to ``default`` (with a warning) when the variable is unset,
    not a number, or not positive.
    """
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning(f"⚠️ Invalid value for {name}: {raw!r}, using default {default}")
        return default
    if value <= 0:
        logger.warning(f"⚠️ Non-positive value for {name}: {raw!r}, using default {default}")
        return default
    return value
