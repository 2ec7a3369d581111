from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings

from litmind.utils.logging_config import LogFiles, Logger

logger = logging.getLogger(__name__)

GENERATE_JOB = "generate_recommendations_job"


def _redis_settings() -> RedisSettings:
    return RedisSettings(
        host=os.getenv("LITMIND_REDIS_HOST", "127.0.0.1"),
        port=int(os.getenv("LITMIND_REDIS_PORT", "6379")),
        database=int(os.getenv("LITMIND_REDIS_DB", "0")),
        password=os.getenv("LITMIND_REDIS_PASSWORD") or None,
    )


async def startup(ctx) -> None:
    # Imported here so the API process can import this module for the trigger
    # without pulling in the worker-side wiring.
    from litmind.config import RecommendationConfig
    from litmind.infrastructure.adapters import build_recommendation_service

    ctx["service"] = build_recommendation_service(RecommendationConfig.from_env())


async def shutdown(ctx) -> None:
    service = ctx.pop("service", None)
    if service is not None:
        await service.close()


async def generate_recommendations_job(ctx, user_id: int) -> Dict[str, Any]:
    """Regenerate one user's recommendations inside the worker."""
    service = ctx.get("service")
    if service is None:
        return {"status": "error", "user_id": user_id, "error": "service not initialized"}

    stored = await service.generate(int(user_id))
    Logger.info(
        f"Worker generated {len(stored)} recommendations for user {user_id}",
        file=LogFiles.RECOMMEND,
    )
    return {"status": "ok", "user_id": int(user_id), "count": len(stored)}


class ArqGenerationTrigger:
    """
    Enqueues deferred regeneration jobs for an arq worker.

    Enqueue failures are logged; they never reach the request that triggered
    the regeneration.
    """

    def __init__(
        self,
        *,
        delay_seconds: float = 2.0,
        redis_settings: Optional[RedisSettings] = None,
        pool: Optional[ArqRedis] = None,
    ):
        self.delay_seconds = max(0.0, float(delay_seconds))
        self._redis_settings = redis_settings or _redis_settings()
        self._pool = pool

    async def _get_pool(self) -> ArqRedis:
        if self._pool is None:
            self._pool = await create_pool(self._redis_settings)
        return self._pool

    async def schedule(self, user_id: int) -> None:
        try:
            pool = await self._get_pool()
            await pool.enqueue_job(GENERATE_JOB, int(user_id), _defer_by=self.delay_seconds)
        except Exception as exc:
            logger.warning("Could not enqueue regeneration for user %s: %s", user_id, exc)
            Logger.error(
                f"Could not enqueue regeneration for user {user_id}: {exc}", file=LogFiles.ERROR
            )

    async def shutdown(self) -> None:
        # Jobs already enqueued belong to the worker.
        if self._pool is not None:
            await self._pool.aclose()
            self._pool = None


class WorkerSettings:
    functions = [generate_recommendations_job]
    on_startup = startup
    on_shutdown = shutdown
    redis_settings = _redis_settings()
