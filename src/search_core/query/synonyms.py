"""Synonym expansion for recall-oriented search terms."""

from __future__ import annotations

import logging

from search_core.config import SynonymConfig
from search_core.query.terms import TermExtractor

logger = logging.getLogger(__name__)


class SynonymExpander:
    """Widens extracted terms with a fixed synonym table."""

    def __init__(self, config: SynonymConfig | None = None) -> None:
        self.config = config or SynonymConfig()

    def expand(self, token: str) -> list[str]:
        synonyms = self.config.table.get(token.lower())
        if synonyms is None:
            return [token]
        return list(synonyms)

    def build_search_terms(self, query: str | None, extractor: TermExtractor) -> str:
        """Build the space-joined term string sent to every source.

        Falls back to the trimmed query when nothing survives extraction.
        """
        terms = extractor.extract_terms(query)
        if not terms:
            return (query or "").strip() or extractor.config.fallback_query

        expanded: list[str] = []
        for term in terms:
            for synonym in self.expand(term):
                if synonym not in expanded:
                    expanded.append(synonym)

        search_terms = " ".join(expanded[: self.config.max_expanded_terms])
        logger.debug("Search terms for %r: %s", query, search_terms)
        return search_terms
