"""
Internal-document fallback strategies.

Used when neither external tier yields anything. Each strategy looks at the
shareable document pool from one angle and returns a tagged
``StrategyResult``; ``run_internal_strategies`` tries them in order and keeps
the first non-empty result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from litmind.application.ports.behavior_port import BehaviorLogPort
from litmind.application.ports.document_port import DocumentStorePort
from litmind.domain.document import Document, is_pdf_document

logger = logging.getLogger(__name__)

REASON_POPULAR = "popular among other users"
REASON_GROUP = "other users in your group"
REASON_OWN = "one of your own documents"

POPULAR_BASE_SCORE = 0.60
OWN_BASE_SCORE = 0.50


@dataclass(frozen=True)
class StrategyResult:
    strategy: str
    documents: List[Document] = field(default_factory=list)
    reason: str = ""
    base_score: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.documents


class PopularityRanker:
    """Orders documents by VIEW/ANALYZE count, newest first on ties."""

    def __init__(self, behaviors: BehaviorLogPort):
        self._behaviors = behaviors
        self._counts: Dict[int, int] = {}

    def count(self, document_id: int) -> int:
        if document_id not in self._counts:
            events = self._behaviors.list_for_document(document_id)
            self._counts[document_id] = sum(1 for e in events if e.counts_towards_popularity)
        return self._counts[document_id]

    def rank(self, documents: Sequence[Document]) -> List[Document]:
        ranked = newest_first(documents)
        # Stable sort keeps the creation-time order within equal counts.
        ranked.sort(key=lambda d: self.count(d.id), reverse=True)
        return ranked


def newest_first(documents: Sequence[Document]) -> List[Document]:
    return sorted(documents, key=lambda d: d.created_at, reverse=True)


@dataclass
class InternalPoolContext:
    """Everything the strategies need for one user and one generation run."""

    user_id: int
    pool: List[Document]
    own_documents: List[Document]
    documents: DocumentStorePort
    ranker: PopularityRanker
    group_id: Optional[int] = None
    limit: int = 10

    def empty(self, strategy: str) -> StrategyResult:
        return StrategyResult(strategy=strategy)


def own_shareable_pool(ctx: InternalPoolContext) -> StrategyResult:
    """The whole shareable pool belongs to the user: recommend their other documents."""
    name = "own_shareable_pool"
    if not ctx.pool or any(d.owner_id != ctx.user_id for d in ctx.pool):
        return ctx.empty(name)
    if len(ctx.pool) == 1:
        documents = list(ctx.pool)
    else:
        documents = newest_first(ctx.pool)[1:]
    return StrategyResult(name, documents[: ctx.limit], REASON_OWN, OWN_BASE_SCORE)


def group_popular(ctx: InternalPoolContext) -> StrategyResult:
    """Popular shareable documents uploaded by others in the user's group."""
    name = "group_popular"
    if ctx.group_id is None:
        return ctx.empty(name)
    candidates = [
        d
        for d in ctx.documents.list_shareable(group_id=ctx.group_id)
        if is_pdf_document(d) and d.owner_id != ctx.user_id
    ]
    if not candidates:
        return ctx.empty(name)
    ranked = ctx.ranker.rank(candidates)
    return StrategyResult(name, ranked[: ctx.limit], REASON_GROUP, POPULAR_BASE_SCORE)


def popular_among_others(ctx: InternalPoolContext) -> StrategyResult:
    """Popular shareable documents of all other users."""
    name = "popular_among_others"
    candidates = [d for d in ctx.pool if d.owner_id != ctx.user_id]
    if not candidates:
        return ctx.empty(name)
    ranked = ctx.ranker.rank(candidates)
    return StrategyResult(name, ranked[: ctx.limit], REASON_POPULAR, POPULAR_BASE_SCORE)


def own_private_documents(ctx: InternalPoolContext) -> StrategyResult:
    """Nothing is shared at all: recommend the user's own documents except the newest."""
    name = "own_private_documents"
    if ctx.pool or not ctx.own_documents:
        return ctx.empty(name)
    documents = newest_first(ctx.own_documents)[1:]
    return StrategyResult(name, documents[: ctx.limit], REASON_OWN, OWN_BASE_SCORE)


InternalStrategy = Callable[[InternalPoolContext], StrategyResult]

DEFAULT_INTERNAL_STRATEGIES: List[InternalStrategy] = [
    own_shareable_pool,
    group_popular,
    popular_among_others,
    own_private_documents,
]


def run_internal_strategies(
    ctx: InternalPoolContext,
    strategies: Optional[Sequence[InternalStrategy]] = None,
) -> StrategyResult:
    """Return the first non-empty strategy result, or an empty one."""
    for strategy in strategies or DEFAULT_INTERNAL_STRATEGIES:
        result = strategy(ctx)
        if not result.is_empty:
            logger.info(
                "Internal strategy %s selected %d documents for user %s",
                result.strategy,
                len(result.documents),
                ctx.user_id,
            )
            return result
    return StrategyResult(strategy="none")
