"""Retrieval-augmented context pipeline.

Usage:
    from notionrag.rag import build_pipeline

    pipeline = build_pipeline()
    text = await pipeline.run("how do refunds work?", tenant_id="acme")
"""

from notionrag.rag.context import ParentCache, RequestContext
from notionrag.rag.expansion import (
    ContextExpander,
    Expansion,
    HierarchicalExpander,
    WindowExpander,
    coerce_neighbor_count,
    get_expander,
)
from notionrag.rag.formatter import ResultEntry, format_results
from notionrag.rag.links import build_deep_link, clean_id
from notionrag.rag.models import SearchHit
from notionrag.rag.pipeline import RagPipeline, build_pipeline
from notionrag.rag.search import VectorSearchStage, coerce_limit
from notionrag.rag.tenant import resolve_tenant

__all__ = [
    "ContextExpander",
    "Expansion",
    "HierarchicalExpander",
    "ParentCache",
    "RagPipeline",
    "RequestContext",
    "ResultEntry",
    "SearchHit",
    "VectorSearchStage",
    "WindowExpander",
    "build_deep_link",
    "build_pipeline",
    "clean_id",
    "coerce_limit",
    "coerce_neighbor_count",
    "format_results",
    "get_expander",
    "resolve_tenant",
]
