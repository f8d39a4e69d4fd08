"""FastAPI entrypoint exposing the search core's pure computations."""

from __future__ import annotations

import os
from dataclasses import asdict
from datetime import datetime
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from search_core.engine import SOURCES, QueryEngine
from search_core.obs.usage import UsageCostAggregator
from search_core.types import QueryLogRecord, SearchHit, Turn


class TurnModel(BaseModel):
    role: str
    content: str


class PlanRequest(BaseModel):
    messages: list[TurnModel] = Field(default_factory=list)
    source: str = "unified"


class HitModel(BaseModel):
    source: str
    title: str = ""
    url: str = ""
    excerpt: str = ""
    metadata: str = ""


class RankRequest(BaseModel):
    terms: str = Field(min_length=1)
    confluence: list[HitModel] | None = None
    sharepoint: list[HitModel] | None = None
    box: list[HitModel] | None = None
    top_n: int | None = Field(default=None, ge=1, le=200)
    route: str = "unified"


class CacheKeyRequest(BaseModel):
    query: str = ""
    endpoint: str = Field(min_length=1)


class LogRecordModel(BaseModel):
    query: str = ""
    endpoint: str = ""
    model: str | None = None
    success: bool = False
    cached: bool = False
    response_time_ms: float | None = Field(default=None, ge=0.0)
    results_count: int = 0
    sources: dict[str, int] = Field(default_factory=dict)
    timestamp: datetime | None = None
    user_id: str = "anonymous"
    error: str | None = None


class AnalyticsRequest(BaseModel):
    records: list[LogRecordModel] = Field(default_factory=list)


class NormalizeRequest(BaseModel):
    source: str
    items: list[dict[str, Any]] = Field(default_factory=list)
    domain: str = ""


app = FastAPI(title="Unified Search Core", version="0.1.0")

_engine = QueryEngine(provider=os.getenv("SEARCH_CORE_PROVIDER", "gemini"))
_aggregator = UsageCostAggregator(extractor=_engine.extractor)


def _to_hits(items: list[HitModel] | None) -> list[SearchHit] | None:
    if items is None:
        return None
    return [SearchHit(**item.model_dump()) for item in items]


def _to_records(request: AnalyticsRequest) -> list[QueryLogRecord]:
    return [QueryLogRecord(**record.model_dump()) for record in request.records]


@app.get("/health")
def health() -> dict[str, Any]:
    return {
        "status": "ok",
        "provider": _engine.provider,
        "sources": list(SOURCES),
    }


@app.post("/plan")
def plan(request: PlanRequest) -> dict[str, Any]:
    messages = [Turn(role=turn.role, content=turn.content) for turn in request.messages]
    result = _engine.plan(messages, request.source)
    if result is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown source: {request.source}. Valid sources: {', '.join(SOURCES)}",
        )
    return {
        "query": result.query,
        "search_terms": result.search_terms,
        "cache_key": str(result.cache_key) if result.cache_key else None,
        "title": result.title,
        "is_title_request": result.is_title_request,
    }


@app.post("/rank")
def rank(request: RankRequest) -> dict[str, Any]:
    results = _engine.rank(
        request.terms,
        confluence=_to_hits(request.confluence),
        sharepoint=_to_hits(request.sharepoint),
        box=_to_hits(request.box),
        top_n=request.top_n,
    )
    return {
        "items": [asdict(hit) for hit in results],
        "sources": _engine.merger.source_counts(results, request.route),
    }


@app.post("/cache/key")
def cache_key(request: CacheKeyRequest) -> dict[str, Any]:
    key = _engine.cache_keys.build_key(request.query, request.endpoint)
    return {
        "key": str(key),
        "normalized_query": key.normalized_query,
        "ttl_seconds": _engine.cache_keys.ttl_seconds,
    }


@app.post("/analytics/cost")
def analytics_cost(request: AnalyticsRequest) -> dict[str, Any]:
    return asdict(_aggregator.cost_report(_to_records(request)))


@app.post("/analytics/dashboard")
def analytics_dashboard(request: AnalyticsRequest) -> dict[str, Any]:
    return asdict(_aggregator.dashboard(_to_records(request)))


@app.post("/hits/normalize")
def normalize_hits(request: NormalizeRequest) -> dict[str, Any]:
    hits = _engine.hits_from_raw(request.source, request.items, domain=request.domain)
    return {"items": [asdict(hit) for hit in hits]}
