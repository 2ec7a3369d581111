"""SearchPort: unified search interface for external paper providers."""

from __future__ import annotations

from typing import List, Protocol, Sequence, runtime_checkable

from litmind.domain.paper import PaperCandidate


@runtime_checkable
class SearchPort(Protocol):
    """Single external keyword-search provider.

    Implementations never raise on transport failure; they return ``[]``.
    """

    @property
    def source_name(self) -> str: ...

    async def search(self, query: str, *, max_results: int = 10) -> List[PaperCandidate]: ...

    async def close(self) -> None: ...


@runtime_checkable
class TrendingSearchPort(SearchPort, Protocol):
    """Provider that can also list the most recent papers of subject categories."""

    async def recent_by_category(
        self, categories: Sequence[str], *, max_results: int = 10
    ) -> List[PaperCandidate]: ...


class NullSearchProvider:
    """No-op provider selected at startup when a provider is disabled."""

    def __init__(self, source_name: str = "disabled"):
        self._source_name = source_name

    @property
    def source_name(self) -> str:
        return self._source_name

    async def search(self, query: str, *, max_results: int = 10) -> List[PaperCandidate]:
        return []

    async def recent_by_category(
        self, categories: Sequence[str], *, max_results: int = 10
    ) -> List[PaperCandidate]:
        return []

    async def close(self) -> None:  # pragma: no cover
        return None
