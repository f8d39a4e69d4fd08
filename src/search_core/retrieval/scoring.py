"""Fuzzy relevance scoring for source hits."""

from __future__ import annotations

import math
from dataclasses import dataclass
from difflib import SequenceMatcher

from search_core.config import ScoringConfig
from search_core.types import SearchHit


@dataclass(slots=True)
class FieldMatch:
    """Average per-term score of one field and whether enough terms hit."""

    score: float
    matched: bool


class FuzzyRelevanceScorer:
    """Scores a document's title and excerpt against a search-term string.

    Per term, an exact substring hit is worth `exact_match_points`. Otherwise
    the term must appear as an in-order character subsequence of the field;
    its similarity is the share of the term covered by the longest contiguous
    run found in the field (0-100). Similarities above `fuzzy_threshold` are
    worth `similarity / fuzzy_divisor` points, so exact hits always dominate
    near misses, and near misses dominate no match at all.
    """

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config or ScoringConfig()

    def similarity(self, term: str, text: str) -> float | None:
        term = term.lower()
        text = text.lower()
        if not term or not text:
            return None
        remaining = iter(text)
        if not all(char in remaining for char in term):
            return None

        matcher = SequenceMatcher(None, term, text, autojunk=False)
        block = matcher.find_longest_match(0, len(term), 0, len(text))
        return 100.0 * block.size / len(term)

    def match_field(self, text: str, terms: str) -> FieldMatch:
        if not text or not terms:
            return FieldMatch(score=0.0, matched=False)

        term_list = terms.lower().split()
        if not term_list:
            return FieldMatch(score=0.0, matched=False)
        text_lower = text.lower()

        total = 0.0
        matched = 0
        for term in term_list:
            if term in text_lower:
                total += self.config.exact_match_points
                matched += 1
                continue
            similarity = self.similarity(term, text_lower)
            if similarity is not None and similarity > self.config.fuzzy_threshold:
                total += abs(similarity) / self.config.fuzzy_divisor
                matched += 1

        return FieldMatch(
            score=total / len(term_list),
            matched=matched / len(term_list) >= self.config.match_ratio,
        )

    def score(self, title: str | None, excerpt: str | None, terms: str) -> int:
        if not title and not excerpt:
            return 0

        title_match = self.match_field(title or "", terms)
        excerpt_match = self.match_field(excerpt or "", terms)

        score = title_match.score * self.config.title_weight + excerpt_match.score
        if title_match.matched:
            score += self.config.title_match_bonus

        full_text = f"{title or ''} {excerpt or ''}".lower()
        if terms and terms.lower() in full_text:
            score += self.config.phrase_bonus

        # Halves round up.
        return math.floor(score + 0.5)

    def score_hits(self, hits: list[SearchHit], terms: str) -> list[SearchHit]:
        """Attach a relevance score to every hit in place."""
        for hit in hits:
            hit.relevance_score = self.score(hit.title, hit.excerpt, terms)
        return hits
