"""Rendering of expanded hits into the rag-search text payload."""

from collections.abc import Sequence
from dataclasses import dataclass

from notionrag.constants import NO_RESULTS_MESSAGE, RESULT_SEPARATOR


@dataclass(frozen=True)
class ResultEntry:
    """One formatted result: the hit's title, expanded text and source link."""

    text: str
    title: str | None = None
    link: str = ""


def format_entry(entry: ResultEntry) -> str:
    lines = [RESULT_SEPARATOR]
    if entry.title:
        lines.append(f"Title: {entry.title}")
    lines.append(entry.text)
    if entry.link:
        lines.append(f"Source: {entry.link}")
    return "\n".join(lines) + "\n\n"


def format_results(entries: Sequence[ResultEntry]) -> str:
    """Concatenate entries in the given (rank) order.

    Returns:
        str: The full payload, or the no-results sentinel for no entries
    """
    if not entries:
        return NO_RESULTS_MESSAGE
    return "".join(format_entry(entry) for entry in entries)
