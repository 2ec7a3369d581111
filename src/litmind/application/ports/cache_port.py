"""RecommendationCachePort: best-effort per-user cache of ranked lists."""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from litmind.domain.recommendation import Recommendation


def cache_key(user_id: int) -> str:
    return f"recommendations:user:{user_id}"


@runtime_checkable
class RecommendationCachePort(Protocol):
    """Implementations swallow their own failures; a miss is ``None``."""

    async def get(self, user_id: int) -> Optional[List[Recommendation]]: ...

    async def set(self, user_id: int, recommendations: List[Recommendation]) -> None: ...

    async def invalidate(self, user_id: int) -> None: ...

    async def close(self) -> None: ...


class NullRecommendationCache:
    """No-op cache selected when no cache store is configured."""

    async def get(self, user_id: int) -> Optional[List[Recommendation]]:
        return None

    async def set(self, user_id: int, recommendations: List[Recommendation]) -> None:
        return None

    async def invalidate(self, user_id: int) -> None:
        return None

    async def close(self) -> None:  # pragma: no cover
        return None
