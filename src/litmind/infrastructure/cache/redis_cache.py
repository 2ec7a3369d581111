"""Redis-backed recommendation cache (best effort)."""

from __future__ import annotations

import json
from typing import Any, List, Optional

import redis.asyncio as redis
from loguru import logger

from litmind.application.ports.cache_port import cache_key
from litmind.domain.recommendation import Recommendation


class RedisRecommendationCache:
    """
    Stores each user's ranked list as one JSON document with a TTL.

    Every failure (connection refused, timeout, undecodable payload) is logged
    and treated as a miss, so callers fall through to the database.
    """

    def __init__(
        self,
        redis_url: str = "redis://127.0.0.1:6379/0",
        *,
        ttl_seconds: int = 3600,
        client: Optional[Any] = None,
    ):
        self.redis_url = redis_url
        self.ttl_seconds = max(1, int(ttl_seconds))
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = redis.from_url(self.redis_url)
        return self._client

    async def get(self, user_id: int) -> Optional[List[Recommendation]]:
        key = cache_key(user_id)
        try:
            raw = await self._get_client().get(key)
        except Exception as exc:
            logger.warning(f"Redis get error for {key}: {exc}")
            return None
        if raw is None:
            return None
        try:
            items = json.loads(raw)
            return [Recommendation.from_dict(item) for item in items]
        except (TypeError, ValueError, KeyError) as exc:
            logger.warning(f"Discarding undecodable cache entry {key}: {exc}")
            await self.invalidate(user_id)
            return None

    async def set(self, user_id: int, recommendations: List[Recommendation]) -> None:
        key = cache_key(user_id)
        try:
            payload = json.dumps([r.to_dict() for r in recommendations], ensure_ascii=False)
            await self._get_client().set(key, payload, ex=self.ttl_seconds)
        except Exception as exc:
            logger.warning(f"Redis set error for {key}: {exc}")

    async def invalidate(self, user_id: int) -> None:
        key = cache_key(user_id)
        try:
            await self._get_client().delete(key)
        except Exception as exc:
            logger.warning(f"Redis delete error for {key}: {exc}")

    async def close(self) -> None:
        if self._client is None:
            return
        try:
            await self._client.aclose()
        except Exception as exc:
            logger.debug(f"Redis close error: {exc}")
        self._client = None
