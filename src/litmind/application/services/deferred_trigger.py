"""In-process deferred regeneration: sleep, then generate, off the request path."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Set

from litmind.utils.logging_config import LogFiles, Logger

logger = logging.getLogger(__name__)

GenerateFn = Callable[[int], Awaitable[object]]


class DeferredGenerationScheduler:
    """
    Schedules ``generate(user_id)`` after ``delay_seconds`` as a background task.

    Failures are logged and never reach the caller of ``schedule``. Tasks still
    pending at ``shutdown`` are cancelled.
    """

    def __init__(self, generate: GenerateFn, delay_seconds: float = 2.0):
        self._generate = generate
        self._delay = max(0.0, float(delay_seconds))
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def schedule(self, user_id: int) -> None:
        task = asyncio.create_task(self._run(user_id), name=f"recommend-user-{user_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, user_id: int) -> None:
        await asyncio.sleep(self._delay)
        try:
            await self._generate(user_id)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Deferred generation failed for user %s", user_id)
            Logger.error(
                f"Deferred generation failed for user {user_id}: {exc}", file=LogFiles.ERROR
            )

    async def shutdown(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
