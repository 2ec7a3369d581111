"""GenerationTrigger: deferred, non-blocking recommendation regeneration."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class GenerationTrigger(Protocol):
    async def schedule(self, user_id: int) -> None:
        """Request a regeneration for ``user_id`` after the configured delay."""
        ...

    async def shutdown(self) -> None:
        """Cancel anything still pending."""
        ...


class NullGenerationTrigger:
    """No-op trigger for deployments without background regeneration."""

    async def schedule(self, user_id: int) -> None:
        return None

    async def shutdown(self) -> None:  # pragma: no cover
        return None
