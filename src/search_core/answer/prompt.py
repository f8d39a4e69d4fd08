"""Result formatting and answer-prompt construction."""

from __future__ import annotations

from collections.abc import Sequence

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

from search_core.config import RankingConfig
from search_core.types import SearchHit

EXCERPT_PREVIEW_CHARS = 200
DEFAULT_SOURCE_ORDER = RankingConfig().source_order

_RESULTS_PROMPT = ChatPromptTemplate.from_messages(
    [
        (
            "human",
            "Based on these search results from {source_label}:\n\n{formatted}\n\n"
            "Question: {query}\n\n"
            "Provide a comprehensive answer with source links using [Title](URL) format.",
        ),
    ]
)

_NO_RESULTS_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("human", "No results found for: {query}. Provide a helpful general answer."),
    ]
)


def format_results(
    results: list[SearchHit],
    query: str,
    *,
    source_order: Sequence[str] = DEFAULT_SOURCE_ORDER,
) -> str:
    """Render ranked hits as the plain-text context handed to the answer model.

    Source counts are listed in `source_order`, independent of ranking.
    """
    if not results:
        return f'No results found for "{query}".'

    counts = {source: 0 for source in source_order}
    for hit in results:
        counts[hit.source] = counts.get(hit.source, 0) + 1
    counts = {source: count for source, count in counts.items() if count > 0}

    lines = [f"Found {len(results)} results from {', '.join(counts)}:"]
    lines.extend(f"  - {source}: {count}" for source, count in counts.items())
    lines.append("")

    for idx, hit in enumerate(results, start=1):
        lines.append(f'{idx}. [{hit.source}] "{hit.title}"')
        if hit.url:
            lines.append(f"   URL: {hit.url}")
        if hit.metadata:
            lines.append(f"   {hit.metadata}")
        if hit.excerpt:
            ellipsis = "..." if len(hit.excerpt) >= EXCERPT_PREVIEW_CHARS else ""
            lines.append(f"   Preview: {hit.excerpt[:EXCERPT_PREVIEW_CHARS]}{ellipsis}")
        lines.append("")

    return "\n".join(lines) + "\n"


def build_answer_messages(
    results: list[SearchHit],
    query: str,
    *,
    source_label: str,
) -> list[BaseMessage]:
    if not results:
        return _NO_RESULTS_PROMPT.format_messages(query=query)
    return _RESULTS_PROMPT.format_messages(
        source_label=source_label,
        formatted=format_results(results, query),
        query=query,
    )
