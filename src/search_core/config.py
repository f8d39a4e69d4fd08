"""Configuration models for the search core."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

_SEARCH_STOPWORDS = (
    "what",
    "is",
    "are",
    "the",
    "a",
    "an",
    "please",
    "tell",
    "me",
    "about",
    "show",
    "provide",
    "with",
    "how",
    "where",
    "when",
    "why",
)

_TITLE_STOPWORDS = (
    "what",
    "is",
    "are",
    "the",
    "a",
    "an",
    "how",
    "where",
    "when",
    "why",
    "tell",
    "me",
    "about",
)

_CACHE_STOPWORDS = (
    "what",
    "is",
    "are",
    "the",
    "a",
    "an",
    "please",
    "tell",
    "me",
    "about",
    "how",
    "why",
    "when",
    "where",
    "can",
    "you",
    "do",
    "does",
)


class ExtractionConfig(BaseModel):
    """Configures query term extraction and title handling."""

    model_config = ConfigDict(frozen=True)

    stopwords: frozenset[str] = Field(default=frozenset(_SEARCH_STOPWORDS))
    title_stopwords: frozenset[str] = Field(default=frozenset(_TITLE_STOPWORDS))
    max_terms: int = Field(default=4, ge=1)
    min_query_length: int = Field(default=1, ge=0)
    max_query_length: int = Field(default=500, ge=2)
    fallback_query: str = "search"
    excluded_markers: tuple[str, ...] = (
        "title for the conversation",
        "title case conventions",
        "concise",
    )
    title_markers: tuple[str, ...] = (
        "title for the conversation",
        "generate a title",
        "create a title",
        "conversation title",
    )
    max_title_words: int = Field(default=5, ge=1)
    max_title_length: int = Field(default=30, ge=1)
    default_title: str = "Search"


class SynonymConfig(BaseModel):
    """Static synonym table used to widen search recall."""

    model_config = ConfigDict(frozen=True)

    table: dict[str, tuple[str, ...]] = Field(
        default_factory=lambda: {
            "k8s": ("kubernetes", "k8s"),
            "kubernetes": ("kubernetes", "k8s"),
            "ai": ("artificial intelligence", "ai", "machine learning", "ml"),
            "ml": ("machine learning", "ml", "ai"),
            "devops": ("devops", "dev ops", "development operations"),
            "cicd": ("ci/cd", "cicd", "continuous integration", "continuous deployment"),
            "eks": ("eks", "elastic kubernetes service", "amazon eks"),
            "aks": ("aks", "azure kubernetes service"),
            "gke": ("gke", "google kubernetes engine"),
        }
    )
    max_expanded_terms: int = Field(default=6, ge=1)


class ScoringConfig(BaseModel):
    """Configures fuzzy relevance scoring.

    `fuzzy_threshold` and `fuzzy_divisor` are expressed on the 0-100
    similarity scale of `FuzzyRelevanceScorer.similarity`. With the defaults a
    fuzzy hit is worth strictly less than half of an exact substring hit.
    """

    model_config = ConfigDict(frozen=True)

    exact_match_points: float = Field(default=100.0, gt=0.0)
    fuzzy_threshold: float = Field(default=50.0, ge=0.0, le=100.0)
    fuzzy_divisor: float = Field(default=2.0, gt=0.0)
    match_ratio: float = Field(default=0.6, ge=0.0, le=1.0)
    title_weight: float = Field(default=3.0, ge=0.0)
    title_match_bonus: float = Field(default=50.0, ge=0.0)
    phrase_bonus: float = Field(default=30.0, ge=0.0)


class RankingConfig(BaseModel):
    """Configures multi-source merging."""

    model_config = ConfigDict(frozen=True)

    top_n: int = Field(default=50, ge=1)
    noise_floor: int = Field(default=10, ge=0)
    source_order: tuple[str, ...] = ("Confluence", "SharePoint", "Box")


class CacheConfig(BaseModel):
    """Configures answer cache keys."""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(default="cache", min_length=1)
    stopwords: frozenset[str] = Field(default=frozenset(_CACHE_STOPWORDS))
    empty_key: str = "empty"
    ttl_seconds: int = Field(default=86400, ge=1)


class ModelPrice(BaseModel):
    """USD per 1M tokens."""

    model_config = ConfigDict(frozen=True)

    input: float = Field(ge=0.0)
    output: float = Field(ge=0.0)


class PricingConfig(BaseModel):
    """Configures cost estimation and savings heuristics."""

    model_config = ConfigDict(frozen=True)

    prices: dict[str, ModelPrice] = Field(
        default_factory=lambda: {
            "gpt-5-mini": ModelPrice(input=0.30, output=1.20),
            "gpt-5-nano": ModelPrice(input=0.10, output=0.40),
            "gpt-4o": ModelPrice(input=2.50, output=10.00),
            "gpt-4.1": ModelPrice(input=3.00, output=12.00),
            "gemini-2.5-flash": ModelPrice(input=0.15, output=0.60),
            "gemini-2.5-flash-lite": ModelPrice(input=0.05, output=0.20),
            "gemini-2.0-flash-exp": ModelPrice(input=0.0, output=0.0),
            "gemini-2.0-flash": ModelPrice(input=0.10, output=0.40),
        }
    )
    default_model: str = "gpt-5-mini"
    free_model: str = "gemini-2.0-flash-exp"
    tokens_per_second: float = Field(default=50.0, gt=0.0)
    default_response_time_ms: float = Field(default=5000.0, ge=0.0)
    input_share: float = Field(default=0.3, ge=0.0, le=1.0)
    days_per_month: int = Field(default=30, ge=1)
    target_cache_rate: float = Field(default=0.60, ge=0.0, le=1.0)
    min_cache_rate: float = Field(default=0.50, ge=0.0, le=1.0)
    slow_query_ms: float = Field(default=30000.0, gt=0.0)
    slow_query_limit: int = Field(default=5, ge=0)
    slow_query_savings_share: float = Field(default=0.3, ge=0.0, le=1.0)
    min_free_model_share: float = Field(default=0.30, ge=0.0, le=1.0)
    free_model_min_queries: int = Field(default=20, ge=0)
    free_model_savings_share: float = Field(default=0.15, ge=0.0, le=1.0)
    max_savings_share: float = Field(default=0.70, ge=0.0, le=1.0)
    min_duplicate_count: int = Field(default=2, ge=0)
    expensive_query_limit: int = Field(default=5, ge=1)

    def price_for(self, model: str | None) -> ModelPrice:
        price = self.prices.get(model or self.default_model)
        if price is None:
            return self.prices[self.default_model]
        return price
