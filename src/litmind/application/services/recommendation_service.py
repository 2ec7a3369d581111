"""
RecommendationService: tiered recommendation generation and read path.

Generation tries three tiers and keeps the first that yields anything:

1. personalized external papers, searched with keywords from the user's own
   analyzed PDF documents
2. trending external papers from fixed subject categories
3. internal shareable documents (see ``internal_strategies``)

The service holds only collaborator references and is safe to share between
concurrent requests; regenerations of the same user are serialized.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from litmind.application.ports.behavior_port import BehaviorLogPort
from litmind.application.ports.cache_port import NullRecommendationCache, RecommendationCachePort
from litmind.application.ports.document_port import DocumentStorePort
from litmind.application.ports.paper_search_port import SearchPort, TrendingSearchPort
from litmind.application.ports.recommendation_port import RecommendationStorePort
from litmind.application.services.candidate_merger import (
    CandidateMerger,
    drop_placeholders,
    rank_scores,
)
from litmind.application.services.internal_strategies import (
    InternalPoolContext,
    InternalStrategy,
    PopularityRanker,
    newest_first,
    run_internal_strategies,
)
from litmind.application.services.text_similarity import best_match_similarity
from litmind.application.services.topic_extractor import (
    TopicExtractor,
    build_search_query,
    signature_sets,
)
from litmind.config import DEFAULT_TRENDING_CATEGORIES
from litmind.domain.behavior import BehaviorType, UserBehaviorEvent
from litmind.domain.document import is_pdf_document
from litmind.domain.paper import PaperCandidate
from litmind.domain.recommendation import (
    INTERNAL_SOURCE_LABEL,
    Recommendation,
    RecommendationAccessDeniedError,
    RecommendationNotFoundError,
    normalize_feedback,
)
from litmind.utils.keyed_lock import KeyedAsyncLock
from litmind.utils.logging_config import LogFiles, Logger, set_trace_id

logger = logging.getLogger(__name__)

REASON_PERSONALIZED = "related to your uploaded document topics"
REASON_TRENDING = "trending in the field"

PERSONALIZED_BASE_SCORE = 0.90
TRENDING_BASE_SCORE = 0.70

Tier = Callable[[int], Awaitable[List[Recommendation]]]


class RecommendationService:
    """Generates, serves and collects feedback on per-user recommendations."""

    def __init__(
        self,
        *,
        documents: DocumentStorePort,
        behaviors: BehaviorLogPort,
        recommendations: RecommendationStorePort,
        keyword_providers: Sequence[SearchPort],
        trending_provider: TrendingSearchPort,
        cache: Optional[RecommendationCachePort] = None,
        trending_categories: Optional[Sequence[str]] = None,
        max_recommendations: int = 10,
        internal_strategies: Optional[Sequence[InternalStrategy]] = None,
    ):
        self._documents = documents
        self._behaviors = behaviors
        self._recommendations = recommendations
        self._keyword_providers = list(keyword_providers)
        self._trending_provider = trending_provider
        self._cache = cache or NullRecommendationCache()
        self._trending_categories = list(trending_categories or DEFAULT_TRENDING_CATEGORIES)
        self._limit = max(1, int(max_recommendations))
        self._internal_strategies = internal_strategies
        self._topics = TopicExtractor(documents)
        self._user_locks = KeyedAsyncLock()

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    async def get_recommendations(self, user_id: int) -> List[Recommendation]:
        """Current ranked list of ``user_id``; read-through cached."""
        cached = await self._cache.get(user_id)
        if cached is not None:
            return cached

        recommendations = await asyncio.to_thread(self._recommendations.list_for_user, user_id)
        await self._cache.set(user_id, recommendations)
        return recommendations

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def generate(self, user_id: int) -> List[Recommendation]:
        """
        Replace the user's recommendation set with a freshly computed batch.

        Never fails because of external providers or missing topic data; in
        the worst case an empty batch is persisted.

        Runs of one user are serialized in this process by a keyed lock. The
        final write swaps the whole batch in one transaction, so a run in
        another process (arq worker, second API worker) cannot leave a
        second batch behind.
        """
        set_trace_id()
        async with self._user_locks.hold(user_id):
            removed = await asyncio.to_thread(self._recommendations.delete_all_for_user, user_id)
            Logger.info(
                f"Generating recommendations for user {user_id}: removed {removed} old rows",
                file=LogFiles.RECOMMEND,
            )

            drafts = await self._compute(user_id)
            stored = await asyncio.to_thread(
                self._recommendations.replace_for_user, user_id, drafts
            )
            await self._cache.invalidate(user_id)

        Logger.info(
            f"Stored {len(stored)} recommendations for user {user_id}", file=LogFiles.RECOMMEND
        )
        return stored

    async def _compute(self, user_id: int) -> List[Recommendation]:
        tiers: List[Tuple[str, Tier]] = [
            ("personalized_external", self._personalized_external_tier),
            ("trending_external", self._trending_external_tier),
            ("internal_popularity", self._internal_popularity_tier),
        ]
        for name, tier in tiers:
            try:
                drafts = await tier(user_id)
            except Exception as exc:
                logger.exception("Tier %s failed for user %s", name, user_id)
                Logger.error(f"Tier {name} failed for user {user_id}: {exc}", file=LogFiles.ERROR)
                drafts = []
            if drafts:
                Logger.info(
                    f"Tier {name} produced {len(drafts)} recommendations for user {user_id}",
                    file=LogFiles.RECOMMEND,
                )
                return drafts
            Logger.info(f"Tier {name} empty for user {user_id}", file=LogFiles.RECOMMEND)
        return []

    async def _personalized_external_tier(self, user_id: int) -> List[Recommendation]:
        query = await asyncio.to_thread(self._personalized_query, user_id)
        if not query:
            return []
        Logger.info(f"Search keywords for user {user_id}: {query}", file=LogFiles.RECOMMEND)

        results = await asyncio.gather(
            *(self._guarded_search(provider, query) for provider in self._keyword_providers)
        )
        merged, _ = CandidateMerger().merge(drop_placeholders(papers) for papers in results)
        return self._external_drafts(
            user_id, merged, base_score=PERSONALIZED_BASE_SCORE, reason=REASON_PERSONALIZED
        )

    def _personalized_query(self, user_id: int) -> str:
        uploads = [d for d in self._documents.list_by_owner(user_id) if is_pdf_document(d)]
        if not uploads:
            return ""

        signatures = self._topics.extract(d.id for d in uploads)
        if not signatures:
            logger.info("No completed analyses among %d uploads of user %s", len(uploads), user_id)
            return ""
        return build_search_query(signature_sets(signatures))

    async def _trending_external_tier(self, user_id: int) -> List[Recommendation]:
        provider = self._trending_provider
        try:
            papers = await provider.recent_by_category(
                self._trending_categories, max_results=self._limit
            )
        except Exception as exc:
            logger.warning("Trending provider %s failed: %s", provider.source_name, exc)
            papers = []

        merged, _ = CandidateMerger().merge([drop_placeholders(papers)])
        return self._external_drafts(
            user_id, merged, base_score=TRENDING_BASE_SCORE, reason=REASON_TRENDING
        )

    async def _internal_popularity_tier(self, user_id: int) -> List[Recommendation]:
        return await asyncio.to_thread(self._internal_drafts, user_id)

    def _internal_drafts(self, user_id: int) -> List[Recommendation]:
        owned = self._documents.list_by_owner(user_id)
        pool = [d for d in self._documents.list_shareable() if is_pdf_document(d)]
        group_id = next((d.group_id for d in newest_first(owned) if d.group_id is not None), None)

        ctx = InternalPoolContext(
            user_id=user_id,
            pool=pool,
            own_documents=[d for d in owned if is_pdf_document(d)],
            documents=self._documents,
            ranker=PopularityRanker(self._behaviors),
            group_id=group_id,
            limit=self._limit,
        )
        result = run_internal_strategies(ctx, self._internal_strategies)
        scores = rank_scores(result.base_score, len(result.documents))
        return [
            Recommendation(
                user_id=user_id,
                recommended_document_id=document.id,
                title=document.name,
                source_label=INTERNAL_SOURCE_LABEL,
                url=document.url,
                reason=result.reason,
                score=score,
            )
            for document, score in zip(result.documents, scores)
        ]

    async def _guarded_search(self, provider: SearchPort, query: str) -> List[PaperCandidate]:
        try:
            return list(await provider.search(query, max_results=self._limit))
        except Exception as exc:
            logger.warning("Provider %s failed: %s", provider.source_name, exc)
            return []

    def _external_drafts(
        self,
        user_id: int,
        papers: Sequence[PaperCandidate],
        *,
        base_score: float,
        reason: str,
    ) -> List[Recommendation]:
        selected = list(papers)[: self._limit]
        scores = rank_scores(base_score, len(selected))
        return [
            Recommendation(
                user_id=user_id,
                external_paper_id=paper.external_id,
                title=paper.title,
                authors=paper.authors_text,
                source_label=paper.source,
                url=paper.url,
                reason=reason,
                score=score,
            )
            for paper, score in zip(selected, scores)
        ]

    # ------------------------------------------------------------------
    # Feedback, behavior log, relevance
    # ------------------------------------------------------------------

    async def update_feedback(
        self, user_id: int, recommendation_id: int, feedback: str
    ) -> Recommendation:
        value = normalize_feedback(feedback)
        recommendation = await asyncio.to_thread(self._recommendations.get, recommendation_id)
        if recommendation is None:
            raise RecommendationNotFoundError(recommendation_id)
        if recommendation.user_id != user_id:
            raise RecommendationAccessDeniedError(recommendation_id, user_id)

        updated = await asyncio.to_thread(
            self._recommendations.update_feedback, recommendation_id, value
        )
        if updated is None:
            raise RecommendationNotFoundError(recommendation_id)
        await self._cache.invalidate(user_id)
        return updated

    def record_behavior(
        self,
        user_id: int,
        document_id: Optional[int],
        behavior_type: Any,
        payload: Optional[Dict[str, Any]] = None,
    ) -> UserBehaviorEvent:
        return self._behaviors.append(
            user_id=user_id,
            behavior_type=BehaviorType.parse(behavior_type),
            document_id=document_id,
            payload=payload or {},
        )

    def score_document_relevance(self, user_id: int, document_id: int) -> float:
        """
        Best-match Jaccard similarity between a document and the user's topics.

        The user's topics come from their own documents plus every document
        they viewed or analyzed.
        """
        candidate = self._topics.extract([document_id]).get(document_id)
        if not candidate:
            return 0.0

        known_ids = {d.id for d in self._documents.list_by_owner(user_id)}
        known_ids.update(
            e.document_id
            for e in self._behaviors.list_for_user(user_id)
            if e.document_id is not None and e.counts_towards_popularity
        )
        known_ids.discard(document_id)

        known = self._topics.extract(sorted(known_ids))
        return best_match_similarity(candidate, known.values())

    async def close(self) -> None:
        providers: List[Any] = list(self._keyword_providers)
        if self._trending_provider not in providers:
            providers.append(self._trending_provider)
        for provider in providers:
            try:
                await provider.close()
            except Exception as exc:
                logger.debug("Closing provider %s failed: %s", provider.source_name, exc)
        await self._cache.close()
