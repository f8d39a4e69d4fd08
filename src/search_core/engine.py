"""Query engine wiring extraction, scoring, ranking and cache keys together."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from search_core.cache.keys import CacheKeyNormalizer
from search_core.query.synonyms import SynonymExpander
from search_core.query.terms import TermExtractor
from search_core.retrieval.merger import ResultMerger
from search_core.retrieval.normalize import BUILDERS
from search_core.retrieval.scoring import FuzzyRelevanceScorer
from search_core.types import QueryPlan, SearchHit, Turn

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SourceProfile:
    """Naming used for one search route."""

    name: str
    title_prefix: str
    label: str

    def endpoint(self, provider: str) -> str:
        if self.name == "unified":
            return f"unified-{provider}"
        return f"{provider}-{self.name}"


SOURCES: dict[str, SourceProfile] = {
    "confluence": SourceProfile("confluence", "Confluence", "Confluence"),
    "sharepoint": SourceProfile("sharepoint", "SharePoint", "SharePoint"),
    "box": SourceProfile("box", "Box", "Box"),
    "unified": SourceProfile("unified", "Search", "Confluence, SharePoint, and Box"),
}


class QueryEngine:
    """Pure search core used by the source-fetching layer.

    The caller fetches raw hits from each source (in parallel, isolating
    failures as empty lists) and feeds them back through `score_source` and
    `rank`. Nothing here performs I/O.
    """

    def __init__(
        self,
        *,
        provider: str = "gemini",
        extractor: TermExtractor | None = None,
        expander: SynonymExpander | None = None,
        scorer: FuzzyRelevanceScorer | None = None,
        merger: ResultMerger | None = None,
        cache_keys: CacheKeyNormalizer | None = None,
    ) -> None:
        self.provider = provider
        self.extractor = extractor or TermExtractor()
        self.expander = expander or SynonymExpander()
        self.scorer = scorer or FuzzyRelevanceScorer()
        self.merger = merger or ResultMerger()
        self.cache_keys = cache_keys or CacheKeyNormalizer()

    def plan(self, messages: Sequence[Turn], source: str = "unified") -> QueryPlan | None:
        """Decide how to serve a conversation for the given source route.

        Returns `None` when `source` is not a known route.
        """
        profile = SOURCES.get(source)
        if profile is None:
            logger.warning("Unknown source route %r", source)
            return None
        if self.extractor.is_title_request(messages):
            question = self.extractor.extract_embedded_question(messages[-1].content)
            title = self.extractor.generate_title(question, profile.title_prefix)
            logger.debug("Title request answered with %r", title)
            return QueryPlan(query=question or "", title=title)

        query = self.extractor.extract_user_query(messages)
        return QueryPlan(
            query=query,
            search_terms=self.search_terms(query),
            cache_key=self.cache_keys.build_key(query, profile.endpoint(self.provider)),
        )

    def search_terms(self, query: str | None) -> str:
        return self.expander.build_search_terms(query, self.extractor)

    def hits_from_raw(
        self, source: str, items: list[dict[str, Any]] | None, *, domain: str = ""
    ) -> list[SearchHit]:
        """Convert one source's raw provider payloads into hits.

        Unknown sources and missing payloads yield no hits.
        """
        builder = BUILDERS.get(source)
        if builder is None or not items:
            return []
        if source == "confluence":
            return [builder(item, domain=domain) for item in items]
        return [builder(item) for item in items]

    def score_source(self, hits: list[SearchHit] | None, terms: str) -> list[SearchHit]:
        if not hits:
            return []
        return self.scorer.score_hits(hits, terms)

    def rank(
        self,
        terms: str,
        *,
        confluence: list[SearchHit] | None = None,
        sharepoint: list[SearchHit] | None = None,
        box: list[SearchHit] | None = None,
        top_n: int | None = None,
    ) -> list[SearchHit]:
        """Score every source's hits and merge them into one ranking."""
        return self.merger.merge(
            self.score_source(confluence, terms),
            self.score_source(sharepoint, terms),
            self.score_source(box, terms),
            top_n=top_n,
        )
