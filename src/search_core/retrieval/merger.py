"""Merging of per-source hit lists into one ranked result set."""

from __future__ import annotations

import logging

from search_core.config import RankingConfig
from search_core.types import SearchHit

logger = logging.getLogger(__name__)


class ResultMerger:
    """Combines Confluence, SharePoint and Box hits into one ranking."""

    def __init__(self, config: RankingConfig | None = None) -> None:
        self.config = config or RankingConfig()

    def merge(
        self,
        confluence: list[SearchHit] | None = None,
        sharepoint: list[SearchHit] | None = None,
        box: list[SearchHit] | None = None,
        *,
        top_n: int | None = None,
    ) -> list[SearchHit]:
        """Rank all hits by relevance and drop near-zero noise.

        A missing or failed source contributes nothing. Sorting is stable, so
        ties keep Confluence, SharePoint, Box encounter order.
        """

        combined: list[SearchHit] = []
        for results in (confluence, sharepoint, box):
            if results:
                combined.extend(results)

        ranked = sorted(combined, key=lambda hit: hit.relevance_score, reverse=True)
        kept = [hit for hit in ranked if hit.relevance_score > self.config.noise_floor]
        logger.info("Ranking: total=%d after_filtering=%d", len(ranked), len(kept))

        limit = self.config.top_n if top_n is None else top_n
        return kept[:limit]

    def source_counts(
        self, results: list[SearchHit], route: str = "unified"
    ) -> dict[str, int]:
        """Tally results per source, keyed by lowercase source name.

        Single-source routes report only their own count.
        """
        if route != "unified":
            return {route: len(results)}
        counts = {source.lower(): 0 for source in self.config.source_order}
        for hit in results:
            key = hit.source.lower()
            if key in counts:
                counts[key] += 1
        return counts
