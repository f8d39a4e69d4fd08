"""Unified search core package."""

from .config import CacheConfig, PricingConfig, RankingConfig, ScoringConfig

__all__ = ["CacheConfig", "PricingConfig", "RankingConfig", "ScoringConfig"]
