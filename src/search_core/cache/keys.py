"""Order-insensitive cache keys for generated answers."""

from __future__ import annotations

import logging
import re

from search_core.config import CacheConfig
from search_core.types import CacheKey, CachedAnswer, SearchHit

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[^\w\s]")


class CacheKeyNormalizer:
    """Derives stable cache keys so reworded queries share one entry.

    Two queries map to the same key when their token sets match after case
    folding, punctuation stripping and stopword removal; tokens are sorted, so
    "k8s devops" and "What is devops, k8s?" are equivalent.
    """

    def __init__(self, config: CacheConfig | None = None) -> None:
        self.config = config or CacheConfig()

    @property
    def ttl_seconds(self) -> int:
        return self.config.ttl_seconds

    def normalize(self, query: str | None) -> str:
        if not query:
            return self.config.empty_key
        tokens = _PUNCTUATION.sub(" ", query.lower().strip()).split()
        kept = sorted(
            token
            for token in tokens
            if len(token) > 1 and token not in self.config.stopwords
        )
        normalized = " ".join(kept) or self.config.empty_key
        logger.debug("Normalized cache query %r -> %r", query, normalized)
        return normalized

    def build_key(self, query: str | None, endpoint: str) -> CacheKey:
        return CacheKey(
            namespace=self.config.namespace,
            endpoint=endpoint,
            normalized_query=self.normalize(query),
        )

    def build_payload(
        self,
        formatted_response: str,
        results: list[SearchHit],
        sources: dict[str, int] | None = None,
    ) -> CachedAnswer:
        return CachedAnswer(
            formatted_response=formatted_response,
            results_count=len(results),
            sources=dict(sources or {}),
        )
