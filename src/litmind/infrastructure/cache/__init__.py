from .memory_cache import InMemoryRecommendationCache
from .redis_cache import RedisRecommendationCache

__all__ = ["InMemoryRecommendationCache", "RedisRecommendationCache"]
