"""Usage analytics, cost accounting, and savings recommendations."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from search_core.config import PricingConfig
from search_core.query.terms import TermExtractor
from search_core.types import (
    CostReport,
    DashboardSummary,
    ExpensiveQuery,
    QueryLogRecord,
    Recommendation,
)

logger = logging.getLogger(__name__)

_ENDPOINT_SOURCES = {
    "confluence": "Confluence",
    "sharepoint": "SharePoint",
    "box": "Box",
}


@dataclass(slots=True)
class _QueryGroup:
    count: int = 0
    total_cost: float = 0.0
    sum_response_time_ms: float = 0.0


class UsageCostAggregator:
    """Computes cost and efficiency metrics over the query log.

    Token usage is not logged, so it is estimated from response time with a
    fixed throughput (`tokens_per_second`) and split between input and output
    by `input_share`. Totals are taken over the sampled window and projected
    to a month by multiplying with `days_per_month`.
    """

    def __init__(
        self,
        config: PricingConfig | None = None,
        *,
        extractor: TermExtractor | None = None,
    ) -> None:
        self.config = config or PricingConfig()
        self.extractor = extractor or TermExtractor()

    def estimate_tokens(self, response_time_ms: float) -> int:
        return math.ceil((response_time_ms / 1000.0) * self.config.tokens_per_second)

    def estimate_cost(self, record: QueryLogRecord) -> float:
        price = self.config.price_for(record.model)
        tokens = self.estimate_tokens(
            record.response_time_ms or self.config.default_response_time_ms
        )
        input_cost = tokens * self.config.input_share * price.input / 1_000_000
        output_cost = tokens * (1.0 - self.config.input_share) * price.output / 1_000_000
        return input_cost + output_cost

    def cost_report(self, records: Sequence[QueryLogRecord]) -> CostReport:
        """Aggregate cost, cache efficiency, expensive queries and advice.

        Cached records cost nothing but still count towards the hit rate.
        """

        total = len(records)
        if total == 0:
            return CostReport(
                total_estimated_cost=0.0,
                potential_savings=0.0,
                cache_hit_rate=0,
                recommendations=[],
                expensive_queries=[],
            )

        window_cost = 0.0
        cached = 0
        for record in records:
            if record.cached:
                cached += 1
            else:
                window_cost += self.estimate_cost(record)

        cache_hit_rate = cached / total
        monthly_cost = window_cost * self.config.days_per_month

        recommendations = [
            item
            for item in (
                self._cache_recommendation(cache_hit_rate, monthly_cost),
                self._slow_query_recommendation(records),
                self._free_model_recommendation(records, monthly_cost),
            )
            if item is not None
        ]
        savings = sum(item.savings for item in recommendations)

        logger.debug(
            "Cost report: records=%d cached=%d monthly_cost=%.6f",
            total,
            cached,
            monthly_cost,
        )
        return CostReport(
            total_estimated_cost=monthly_cost,
            potential_savings=min(savings, monthly_cost * self.config.max_savings_share),
            cache_hit_rate=_percent(cache_hit_rate),
            recommendations=recommendations,
            expensive_queries=self.expensive_queries(records),
        )

    def expensive_queries(self, records: Sequence[QueryLogRecord]) -> list[ExpensiveQuery]:
        """Find repeated queries that keep costing money."""
        groups: dict[str, _QueryGroup] = {}
        for record in records:
            if self.extractor.is_title_text(record.query):
                continue
            group = groups.setdefault((record.query or "").lower().strip(), _QueryGroup())
            group.count += 1
            if not record.cached:
                group.total_cost += self.estimate_cost(record)
            group.sum_response_time_ms += record.response_time_ms or 0.0

        repeated = [
            ExpensiveQuery(
                query=query,
                count=group.count,
                total_cost=group.total_cost,
                avg_response_time_ms=_half_up(group.sum_response_time_ms / group.count),
                estimated_cost=group.total_cost / group.count,
            )
            for query, group in groups.items()
            if group.count > self.config.min_duplicate_count and group.total_cost > 0
        ]
        repeated.sort(key=lambda item: item.total_cost, reverse=True)
        return repeated[: self.config.expensive_query_limit]

    def dashboard(
        self,
        records: Sequence[QueryLogRecord],
        *,
        top: int = 10,
        recent: int = 20,
    ) -> DashboardSummary:
        """Aggregate dashboard metrics over the whole log."""
        total = len(records)
        successful = sum(1 for record in records if record.success)
        cached = sum(1 for record in records if record.cached)
        timed = [
            record.response_time_ms
            for record in records
            if record.response_time_ms is not None
        ]

        query_counts: dict[str, int] = {}
        breakdown: dict[str, int] = {}
        for record in records:
            query_counts[record.query] = query_counts.get(record.query, 0) + 1
            source = _source_name(record.endpoint)
            breakdown[source] = breakdown.get(source, 0) + 1

        top_queries = sorted(query_counts.items(), key=lambda item: item[1], reverse=True)
        recent_queries = sorted(records, key=_timestamp_key, reverse=True)

        return DashboardSummary(
            total_queries=total,
            success_rate=_percent(successful / total) if total else 0,
            avg_response_time_ms=_half_up(sum(timed) / len(timed)) if timed else 0,
            cache_hit_rate=_percent(cached / total) if total else 0,
            top_queries=[
                {"query": query, "count": count} for query, count in top_queries[:top]
            ],
            source_breakdown=breakdown,
            recent_queries=recent_queries[:recent],
            cost_optimization=self.cost_report(records),
        )

    def _cache_recommendation(
        self, cache_hit_rate: float, monthly_cost: float
    ) -> Recommendation | None:
        if cache_hit_rate >= self.config.min_cache_rate:
            return None
        target = self.config.target_cache_rate
        return Recommendation(
            title="Improve Cache Hit Rate",
            description=(
                f"Current cache hit rate is {_percent(cache_hit_rate)}%. "
                f"Target {_percent(target)}% for better cost efficiency."
            ),
            savings=monthly_cost * max(0.0, target - cache_hit_rate),
        )

    def _slow_query_recommendation(
        self, records: Sequence[QueryLogRecord]
    ) -> Recommendation | None:
        slow = [
            record
            for record in records
            if not record.cached
            and record.response_time_ms is not None
            and record.response_time_ms > self.config.slow_query_ms
        ]
        if len(slow) <= self.config.slow_query_limit:
            return None
        slow_cost = sum(
            self.estimate_cost(record) for record in slow[: self.config.slow_query_limit]
        )
        seconds = _half_up(self.config.slow_query_ms / 1000.0)
        return Recommendation(
            title="Optimize Slow Queries",
            description=f"{len(slow)} queries take >{seconds}s. Optimize search parameters.",
            savings=slow_cost * self.config.slow_query_savings_share * self.config.days_per_month,
        )

    def _free_model_recommendation(
        self, records: Sequence[QueryLogRecord], monthly_cost: float
    ) -> Recommendation | None:
        total = len(records)
        free = sum(1 for record in records if record.model == self.config.free_model)
        share = free / total if total else 0.0
        if share >= self.config.min_free_model_share or total <= self.config.free_model_min_queries:
            return None
        return Recommendation(
            title="Use More Free Models",
            description=(
                f"Only {_percent(share)}% queries use free {self.config.free_model}. "
                "Increase usage for zero cost."
            ),
            savings=monthly_cost * self.config.free_model_savings_share,
        )


def _half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _percent(ratio: float) -> int:
    return _half_up(ratio * 100)


def _source_name(endpoint: str) -> str:
    suffix = endpoint.rsplit("-", 1)[-1].lower()
    return _ENDPOINT_SOURCES.get(suffix, endpoint)


def _timestamp_key(record: QueryLogRecord) -> float:
    if record.timestamp is None:
        return float("-inf")
    return record.timestamp.timestamp()
