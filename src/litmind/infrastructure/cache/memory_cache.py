"""Process-local recommendation cache for single-instance deployments and tests."""

from __future__ import annotations

import time
from typing import Callable, Dict, List, Optional, Tuple

from litmind.application.ports.cache_port import cache_key
from litmind.domain.recommendation import Recommendation


class InMemoryRecommendationCache:
    def __init__(self, *, ttl_seconds: int = 3600, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = max(1, int(ttl_seconds))
        self._clock = clock
        self._entries: Dict[str, Tuple[float, List[Recommendation]]] = {}

    async def get(self, user_id: int) -> Optional[List[Recommendation]]:
        key = cache_key(user_id)
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, recommendations = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return list(recommendations)

    async def set(self, user_id: int, recommendations: List[Recommendation]) -> None:
        self._entries[cache_key(user_id)] = (
            self._clock() + self.ttl_seconds,
            list(recommendations),
        )

    async def invalidate(self, user_id: int) -> None:
        self._entries.pop(cache_key(user_id), None)

    async def close(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
