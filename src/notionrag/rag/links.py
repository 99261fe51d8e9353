"""Deep links back to the Notion source of a hit."""

from collections.abc import Mapping
from typing import Any

from notionrag.constants import NOTION_BASE_URL


def clean_id(value: str) -> str:
    """Strip the hyphens Notion puts in page and block ids."""
    return value.replace("-", "")


def _text(metadata: Mapping[str, Any], key: str) -> str:
    value = metadata.get(key)
    return value if isinstance(value, str) else ""


def build_deep_link(metadata: Mapping[str, Any]) -> str:
    """Build the source URL for a hit from its metadata.

    With an ``anchor_block_id`` the link points at the block:
    ``https://notion.so/{page}#{block}`` with hyphens removed from both ids.
    Without one, the stored ``url`` is used verbatim, then the bare page link.
    Returns an empty string when the metadata identifies no source.
    """
    page_id = clean_id(_text(metadata, "notion_page_id"))
    block_id = clean_id(_text(metadata, "anchor_block_id"))

    if block_id:
        return f"{NOTION_BASE_URL}/{page_id}#{block_id}"

    url = _text(metadata, "url")
    if url:
        return url

    if page_id:
        return f"{NOTION_BASE_URL}/{page_id}"
    return ""
