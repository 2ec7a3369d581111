from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from litmind.application.services.topic_extractor import (
    MAX_QUERY_LENGTH,
    TopicExtractor,
    build_search_query,
    extract_keywords,
    signature_sets,
)
from litmind.domain.document import AnalysisStatus, Document, DocumentAnalysis


class _FakeDocuments:
    def __init__(self, analyses: Dict[int, DocumentAnalysis]):
        self._analyses = analyses

    def get(self, document_id: int) -> Optional[Document]:
        return None

    def list_by_owner(self, owner_id: int) -> List[Document]:
        return []

    def list_shareable(self, *, group_id=None) -> List[Document]:
        return []

    def get_analysis(self, document_id: int) -> Optional[DocumentAnalysis]:
        return self._analyses.get(document_id)


def test_extract_keywords_drops_punctuation_short_tokens_and_stop_words():
    keywords = extract_keywords("The Transformer, and attention-based models! On GPU.")

    assert keywords == {"transformer", "attention", "based", "models", "gpu"}


def test_extract_keywords_splits_on_underscore_and_keeps_digits():
    assert extract_keywords("multi_head self_attention bert2023") == {
        "multi",
        "head",
        "self",
        "attention",
        "bert2023",
    }


def test_extract_keywords_handles_chinese_text():
    keywords = extract_keywords("深度学习 的 模型，图神经网络")

    assert "深度学习" in keywords
    assert "图神经网络" in keywords
    assert "的" not in keywords
    assert "模型" not in keywords


def test_extract_keywords_empty_text():
    assert extract_keywords("") == set()
    assert extract_keywords("   !!! ,,, ") == set()


def test_build_search_query_ranks_by_frequency_then_length():
    query = build_search_query(
        [
            {"neural", "network", "graph"},
            {"neural", "graph", "learning"},
        ]
    )

    assert query == "neural graph learning network"


def test_build_search_query_skips_terms_shorter_than_four():
    query = build_search_query([{"gnn", "cnn", "vision"}])

    assert query == "vision"


def test_build_search_query_caps_terms_and_length():
    sets = [{f"{chr(ord('a') + i)}" * 30 for i in range(8)}]

    query = build_search_query(sets)

    assert len(query) <= MAX_QUERY_LENGTH
    assert len(build_search_query(sets, max_length=1000).split()) == 5


def test_build_search_query_is_deterministic():
    sets = [{"delta", "alpha", "charlie", "bravo"}, {"echo", "alpha"}]

    assert build_search_query(sets) == build_search_query(list(reversed(sets)))
    assert build_search_query(sets) == "alpha charlie bravo delta echo"


def test_build_search_query_empty():
    assert build_search_query([]) == ""
    assert build_search_query([set(), {"abc"}]) == ""


def test_topic_extractor_only_uses_completed_analyses():
    documents = _FakeDocuments(
        {
            1: DocumentAnalysis(
                document_id=1,
                status=AnalysisStatus.COMPLETED,
                background="Graph neural networks",
                results="Molecular property prediction",
            ),
            2: DocumentAnalysis(
                document_id=2, status=AnalysisStatus.PENDING, content="Vision transformers"
            ),
            4: DocumentAnalysis(document_id=4, status=AnalysisStatus.COMPLETED, notes="the and of"),
        }
    )

    signatures = TopicExtractor(documents).extract([1, 2, 3, 4])

    assert list(signatures) == [1]
    assert signatures[1] == frozenset(
        {"graph", "neural", "networks", "molecular", "property", "prediction"}
    )


def test_signature_sets_are_ordered_by_document_id():
    signatures = {5: frozenset({"five"}), 2: frozenset({"two"})}

    assert signature_sets(signatures) == [frozenset({"two"}), frozenset({"five"})]


def test_document_topic_text_skips_missing_sections():
    analysis = DocumentAnalysis(document_id=1, background="alpha", content=None, notes="omega")

    assert analysis.topic_text() == "alpha omega"


def test_document_url_points_at_viewer():
    doc = Document(id=42, owner_id=1, name="a.pdf", created_at=datetime.now(timezone.utc))

    assert doc.url == "/pdf/42"
