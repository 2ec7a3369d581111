"""
Topic extraction from completed document analyses.

A topic signature is the bag of keywords of one document's analysis text:
lowercased, punctuation removed, short tokens and stop-words dropped.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Set

from litmind.application.ports.document_port import DocumentStorePort

logger = logging.getLogger(__name__)

# Common function words of the two working languages (English, Chinese).
STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
        "的", "是", "在", "了", "和", "与", "或", "但", "而", "为", "以", "及",
    }
)

MIN_KEYWORD_LENGTH = 3
MIN_QUERY_TERM_LENGTH = 4
MAX_QUERY_TERMS = 5
MAX_QUERY_LENGTH = 100

# Anything that is not a letter, digit or whitespace; \w also admits "_".
_NON_WORD_RX = re.compile(r"[^\w\s]|_")
_WS_RX = re.compile(r"\s+")


def _tokenize(text: str) -> List[str]:
    cleaned = _NON_WORD_RX.sub(" ", (text or "").lower())
    return [t for t in _WS_RX.split(cleaned) if t]


def extract_keywords(text: str) -> Set[str]:
    """Return the keyword set of ``text``."""
    return {
        token
        for token in _tokenize(text)
        if len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS
    }


def build_search_query(
    keyword_sets: Iterable[Iterable[str]],
    *,
    max_terms: int = MAX_QUERY_TERMS,
    max_length: int = MAX_QUERY_LENGTH,
) -> str:
    """
    Derive a short provider query from several topic signatures.

    Terms are ranked by how many signatures contain them, then by length
    (longer terms are more specific), then alphabetically so the query is
    stable across runs.
    """
    document_frequency: Counter = Counter()
    for keywords in keyword_sets:
        document_frequency.update(set(keywords))

    candidates = [
        term
        for term in document_frequency
        if len(term) >= MIN_QUERY_TERM_LENGTH and term not in STOP_WORDS
    ]
    candidates.sort(key=lambda t: (-document_frequency[t], -len(t), t))

    query = " ".join(candidates[: max(0, int(max_terms))])
    return query[:max_length].strip()


class TopicExtractor:
    """Builds topic signatures for documents whose analysis has completed."""

    def __init__(self, documents: DocumentStorePort):
        self._documents = documents

    def extract(self, document_ids: Iterable[int]) -> Dict[int, frozenset]:
        """
        Map document id to its non-empty keyword set.

        Documents without an analysis, with an analysis that is not
        COMPLETED, or whose analysis yields no keywords are omitted.
        """
        signatures: Dict[int, frozenset] = {}
        for document_id in document_ids:
            analysis = self._documents.get_analysis(document_id)
            if analysis is None or not analysis.is_completed:
                continue
            keywords = extract_keywords(analysis.topic_text())
            if keywords:
                signatures[document_id] = frozenset(keywords)

        logger.debug("Extracted %d topic signatures", len(signatures))
        return signatures


def signature_sets(signatures: Mapping[int, frozenset]) -> List[frozenset]:
    """Signatures in ascending document-id order."""
    return [signatures[k] for k in sorted(signatures)]
