"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(slots=True)
class Turn:
    """One message of a chat conversation."""

    role: str
    content: str


@dataclass(slots=True)
class SearchHit:
    """A single item returned by a document source.

    `relevance_score` is the only field written by the core.
    """

    source: str
    title: str
    url: str = ""
    excerpt: str = ""
    metadata: str = ""
    relevance_score: int = 0


@dataclass(slots=True, frozen=True)
class CacheKey:
    """Identifies a cached answer for semantically equivalent queries."""

    namespace: str
    endpoint: str
    normalized_query: str

    def __str__(self) -> str:
        return f"{self.namespace}:{self.endpoint}:{self.normalized_query}"


@dataclass(slots=True)
class CachedAnswer:
    """Value payload stored under a `CacheKey`."""

    formatted_response: str
    results_count: int
    sources: dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class QueryLogRecord:
    """Outcome metadata of one completed request."""

    query: str
    endpoint: str
    model: str | None = None
    success: bool = False
    cached: bool = False
    response_time_ms: float | None = None
    results_count: int = 0
    sources: dict[str, int] = field(default_factory=dict)
    timestamp: datetime | None = None
    user_id: str = "anonymous"
    error: str | None = None


@dataclass(slots=True)
class Recommendation:
    title: str
    description: str
    savings: float


@dataclass(slots=True)
class ExpensiveQuery:
    query: str
    count: int
    total_cost: float
    avg_response_time_ms: int
    estimated_cost: float


@dataclass(slots=True)
class CostReport:
    """Cost and efficiency figures; money values are monthly projections."""

    total_estimated_cost: float
    potential_savings: float
    cache_hit_rate: int
    recommendations: list[Recommendation]
    expensive_queries: list[ExpensiveQuery]


@dataclass(slots=True)
class DashboardSummary:
    total_queries: int
    success_rate: int
    avg_response_time_ms: int
    cache_hit_rate: int
    top_queries: list[dict[str, Any]]
    source_breakdown: dict[str, int]
    recent_queries: list[QueryLogRecord]
    cost_optimization: CostReport


@dataclass(slots=True)
class QueryPlan:
    """How an inbound conversation should be served.

    Title-generation requests carry `title` and no cache key; search requests
    carry the user query, the search-term string and the cache key.
    """

    query: str
    search_terms: str = ""
    cache_key: CacheKey | None = None
    title: str | None = None

    @property
    def is_title_request(self) -> bool:
        return self.title is not None
