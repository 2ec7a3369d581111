# src/litmind/application/services/candidate_merger.py
"""
Cross-provider candidate merging.

Provider results are concatenated in provider order and deduplicated by
normalized title; the first occurrence wins and keeps its provider
attribution.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Set, Tuple

from litmind.domain.paper import PaperCandidate

logger = logging.getLogger(__name__)

SCORE_STEP = 0.05


class CandidateMerger:
    """
    Title-keyed deduplication for one recommendation request.

    Candidates without a title are dropped; later duplicates are counted and
    discarded without merging metadata.
    """

    def merge(
        self, results_by_provider: Iterable[Sequence[PaperCandidate]]
    ) -> Tuple[List[PaperCandidate], int]:
        """
        Merge provider result lists.

        Returns:
            Tuple of (unique candidates in first-seen order, duplicates removed)
        """
        seen: Set[str] = set()
        unique: List[PaperCandidate] = []
        duplicates = 0

        for papers in results_by_provider:
            for paper in papers:
                key = paper.title_key
                if not key:
                    continue
                if key in seen:
                    duplicates += 1
                    continue
                seen.add(key)
                unique.append(paper)

        logger.info(
            "Candidate merge complete: %d unique (%d duplicates removed)", len(unique), duplicates
        )
        return unique, duplicates


def drop_placeholders(papers: Iterable[PaperCandidate]) -> List[PaperCandidate]:
    """Remove candidates whose external id is missing or a fixture value."""
    return [p for p in papers if not p.is_placeholder()]


def rank_scores(base: float, count: int, step: float = SCORE_STEP) -> List[float]:
    """Scores ``base, base - step, ...`` rounded to two decimals and clamped to [0, 1]."""
    return [min(1.0, max(0.0, round(base - i * step, 2))) for i in range(max(0, count))]
