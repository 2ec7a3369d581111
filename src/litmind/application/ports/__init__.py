"""Application ports (interfaces) used by the application layer."""

from .behavior_port import BehaviorLogPort
from .cache_port import NullRecommendationCache, RecommendationCachePort
from .document_port import DocumentStorePort
from .paper_search_port import NullSearchProvider, SearchPort, TrendingSearchPort
from .recommendation_port import RecommendationStorePort
from .trigger_port import GenerationTrigger, NullGenerationTrigger

__all__ = [
    "BehaviorLogPort",
    "DocumentStorePort",
    "GenerationTrigger",
    "NullGenerationTrigger",
    "NullRecommendationCache",
    "NullSearchProvider",
    "RecommendationCachePort",
    "RecommendationStorePort",
    "SearchPort",
    "TrendingSearchPort",
]
