"""Jaccard keyword-overlap similarity."""

from __future__ import annotations

from typing import AbstractSet, Iterable


def jaccard_similarity(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    """|A ∩ B| / |A ∪ B|, or 0.0 when either set is empty."""
    if not a or not b:
        return 0.0
    union = len(a | b)
    if union == 0:
        return 0.0
    return len(a & b) / union


def best_match_similarity(
    candidate: AbstractSet[str], known_sets: Iterable[AbstractSet[str]]
) -> float:
    """Highest similarity between ``candidate`` and any of the user's topic sets."""
    best = 0.0
    for known in known_sets:
        best = max(best, jaccard_similarity(candidate, known))
    return best
