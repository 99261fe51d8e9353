"""Utility functions for database operations."""

import json
import math
from typing import Any


def cosine_similarity(vec_a: list[float], vec_b: list[float]) -> float:
    """Compute cosine similarity between two vectors.

    Args:
        vec_a: First embedding vector
        vec_b: Second embedding vector

    Returns:
        float: Cosine similarity score between -1 and 1
    """
    if not vec_a or not vec_b or len(vec_a) != len(vec_b):
        return 0.0

    dot_product = sum(a * b for a, b in zip(vec_a, vec_b))
    magnitude_a = math.sqrt(sum(a * a for a in vec_a))
    magnitude_b = math.sqrt(sum(b * b for b in vec_b))

    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0

    return dot_product / (magnitude_a * magnitude_b)


def cosine_distance(similarity: float) -> float:
    """Convert a cosine similarity into a non-negative distance."""
    return max(0.0, 1.0 - similarity)


def decode_metadata(raw: Any) -> dict[str, Any]:
    """Decode a metadata field that may be stored as a dict or a JSON string.

    Args:
        raw: The stored metadata value (dict, JSON text, or None)

    Returns:
        dict: The metadata mapping (empty when absent)

    Raises:
        ValueError: If the value is not a mapping or not valid JSON
    """
    if raw is None:
        return {}
    if isinstance(raw, (str, bytes)):
        raw = json.loads(raw)
    if not isinstance(raw, dict):
        raise ValueError(f"metadata must be an object, got {type(raw).__name__}")
    return raw


def normalize_chunk_index(raw: Any) -> int:
    """Coerce a stored ``chunk_index`` to an int.

    Integral floats (``5.0``) and numeric strings (``"5"``) are accepted.

    Raises:
        ValueError: For booleans, fractional or non-finite floats, and
            anything else that is not an integer
    """
    if isinstance(raw, bool):
        raise ValueError(f"invalid chunk_index: {raw!r}")
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValueError(f"invalid chunk_index: {raw!r}")
        return int(raw)
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid chunk_index: {raw!r}") from e
