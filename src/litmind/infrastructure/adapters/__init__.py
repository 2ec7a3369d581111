"""Wiring of concrete providers, stores, cache and trigger from configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from litmind.application.ports.cache_port import NullRecommendationCache, RecommendationCachePort
from litmind.application.ports.paper_search_port import (
    NullSearchProvider,
    SearchPort,
    TrendingSearchPort,
)
from litmind.application.ports.trigger_port import GenerationTrigger, NullGenerationTrigger
from litmind.application.services.deferred_trigger import DeferredGenerationScheduler
from litmind.application.services.recommendation_service import RecommendationService
from litmind.config import RecommendationConfig
from litmind.infrastructure.cache.memory_cache import InMemoryRecommendationCache
from litmind.infrastructure.cache.redis_cache import RedisRecommendationCache
from litmind.infrastructure.harvesters.arxiv_harvester import ArxivHarvester
from litmind.infrastructure.harvesters.semantic_scholar_harvester import SemanticScholarHarvester
from litmind.infrastructure.stores.behavior_store import BehaviorStore
from litmind.infrastructure.stores.document_store import DocumentStore
from litmind.infrastructure.stores.recommendation_store import RecommendationStore

logger = logging.getLogger(__name__)


@dataclass
class SearchProviders:
    keyword: List[SearchPort]
    trending: TrendingSearchPort


def build_search_providers(config: RecommendationConfig) -> SearchProviders:
    """Keyword providers in merge order (arXiv, then Semantic Scholar) plus the trending one."""
    if config.arxiv_enabled:
        arxiv = ArxivHarvester(
            connect_timeout=config.connect_timeout, read_timeout=config.read_timeout
        )
    else:
        arxiv = NullSearchProvider("arxiv")

    if config.semantic_scholar_enabled:
        s2 = SemanticScholarHarvester(
            api_key=config.semantic_scholar_api_key,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
        )
    else:
        s2 = NullSearchProvider("semantic_scholar")

    return SearchProviders(keyword=[arxiv, s2], trending=arxiv)


def build_cache(config: RecommendationConfig) -> RecommendationCachePort:
    backend = config.cache_backend
    if backend == "redis":
        return RedisRecommendationCache(config.redis_url, ttl_seconds=config.cache_ttl_seconds)
    if backend == "memory":
        return InMemoryRecommendationCache(ttl_seconds=config.cache_ttl_seconds)
    if backend not in ("", "none"):
        logger.warning("Unknown cache backend %r; caching disabled", backend)
    return NullRecommendationCache()


def build_recommendation_service(
    config: Optional[RecommendationConfig] = None,
    db_url: Optional[str] = None,
) -> RecommendationService:
    config = config or RecommendationConfig.from_env()
    providers = build_search_providers(config)
    return RecommendationService(
        documents=DocumentStore(db_url),
        behaviors=BehaviorStore(db_url),
        recommendations=RecommendationStore(db_url),
        keyword_providers=providers.keyword,
        trending_provider=providers.trending,
        cache=build_cache(config),
        trending_categories=config.trending_categories,
        max_recommendations=config.max_recommendations,
    )


def build_generation_trigger(
    service: RecommendationService, config: Optional[RecommendationConfig] = None
) -> GenerationTrigger:
    config = config or RecommendationConfig.from_env()
    backend = config.trigger_backend
    if backend == "arq":
        from litmind.infrastructure.queue.arq_worker import ArqGenerationTrigger

        return ArqGenerationTrigger(delay_seconds=config.trigger_delay_seconds)
    if backend == "inprocess":
        return DeferredGenerationScheduler(
            service.generate, delay_seconds=config.trigger_delay_seconds
        )
    if backend not in ("", "none"):
        logger.warning("Unknown trigger backend %r; deferred regeneration disabled", backend)
    return NullGenerationTrigger()
