from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from litmind.domain.behavior import BehaviorType
from litmind.domain.document import AnalysisStatus
from litmind.domain.recommendation import Recommendation
from litmind.infrastructure.stores.behavior_store import BehaviorStore
from litmind.infrastructure.stores.document_store import DocumentStore
from litmind.infrastructure.stores.recommendation_store import RecommendationStore

BASE_TIME = datetime(2026, 2, 1, tzinfo=timezone.utc)


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'stores.db'}"


def _rec(user_id, score, **kwargs):
    kwargs.setdefault("external_paper_id", f"ext-{score}")
    return Recommendation(user_id=user_id, title=f"T{score}", score=score, reason="r", **kwargs)


def test_document_store_lists_by_owner_newest_first(db_url):
    store = DocumentStore(db_url)
    old = store.add_document(owner_id=1, name="old.pdf", created_at=BASE_TIME)
    new = store.add_document(owner_id=1, name="new.pdf", created_at=BASE_TIME + timedelta(hours=1))
    store.add_document(owner_id=2, name="other.pdf", created_at=BASE_TIME)

    assert [d.id for d in store.list_by_owner(1)] == [new.id, old.id]
    assert store.get(old.id).name == "old.pdf"
    assert store.get(9999) is None


def test_document_store_shareable_with_group_filter(db_url):
    store = DocumentStore(db_url)
    a = store.add_document(owner_id=1, name="a.pdf", is_shareable=True, group_id=3)
    b = store.add_document(owner_id=2, name="b.pdf", is_shareable=True, group_id=4)
    store.add_document(owner_id=2, name="private.pdf", is_shareable=False, group_id=3)

    assert {d.id for d in store.list_shareable()} == {a.id, b.id}
    assert [d.id for d in store.list_shareable(group_id=3)] == [a.id]


def test_document_store_analysis_upsert(db_url):
    store = DocumentStore(db_url)
    doc = store.add_document(owner_id=1, name="a.pdf")

    store.save_analysis(doc.id, status=AnalysisStatus.PROCESSING)
    saved = store.save_analysis(doc.id, background="graph learning", notes="sparse")

    analysis = store.get_analysis(doc.id)
    assert saved == analysis
    assert analysis.is_completed
    assert analysis.topic_text() == "graph learning sparse"
    assert store.get_analysis(9999) is None


def test_behavior_store_is_newest_first_and_keeps_payload(db_url):
    store = BehaviorStore(db_url)
    first = store.append(user_id=1, behavior_type=BehaviorType.UPLOAD, document_id=5)
    second = store.append(
        user_id=1, behavior_type="view", document_id=6, payload={"page": 3, "zoom": "fit"}
    )
    store.append(user_id=2, behavior_type=BehaviorType.ANALYZE, document_id=5)

    events = store.list_for_user(1)

    assert [e.id for e in events] == [second.id, first.id]
    assert events[0].behavior_type == BehaviorType.VIEW
    assert events[0].payload == {"page": 3, "zoom": "fit"}
    assert events[1].document_id == 5
    assert len(store.list_for_document(5)) == 2


def test_behavior_store_rejects_unknown_type(db_url):
    store = BehaviorStore(db_url)

    with pytest.raises(ValueError):
        store.append(user_id=1, behavior_type="DOWNLOAD")


def test_recommendation_store_batch_roundtrip(db_url):
    store = RecommendationStore(db_url)

    stored = store.replace_for_user(
        1,
        [
            _rec(1, 0.65, authors="A, B", source_label="arXiv", url="https://arxiv.org/abs/1"),
            _rec(1, 0.7),
            _rec(1, 0.5, external_paper_id=None, recommended_document_id=12),
        ]
    )

    assert all(r.id is not None for r in stored)
    assert all(r.created_at is not None for r in stored)
    listed = store.list_for_user(1)
    assert [r.score for r in listed] == pytest.approx([0.7, 0.65, 0.5])
    assert listed[1].authors == "A, B"
    assert listed[2].recommended_document_id == 12
    assert listed[2].external_paper_id is None


def test_recommendation_store_delete_and_feedback(db_url):
    store = RecommendationStore(db_url)
    [kept] = store.replace_for_user(2, [_rec(2, 0.9)])
    store.replace_for_user(1, [_rec(1, 0.9), _rec(1, 0.85)])

    assert store.delete_all_for_user(1) == 2
    assert store.list_for_user(1) == []

    updated = store.update_feedback(kept.id, "NOT_INTERESTED")
    assert updated.feedback == "NOT_INTERESTED"
    assert store.get(kept.id).feedback == "NOT_INTERESTED"
    assert store.update_feedback(9999, "LIKED") is None


def test_recommendation_store_empty_batch_clears_user(db_url):
    store = RecommendationStore(db_url)
    store.replace_for_user(1, [_rec(1, 0.9)])

    assert store.replace_for_user(1, []) == []
    assert store.list_for_user(1) == []


def test_recommendation_store_replace_drops_previous_batch(db_url):
    store = RecommendationStore(db_url)
    store.replace_for_user(1, [_rec(1, 0.9), _rec(1, 0.85)])
    [other] = store.replace_for_user(2, [_rec(2, 0.7)])

    replaced = store.replace_for_user(1, [_rec(1, 0.6)])

    assert [r.id for r in store.list_for_user(1)] == [replaced[0].id]
    assert store.get(other.id) is not None


def test_recommendation_store_replace_rejects_foreign_rows(db_url):
    store = RecommendationStore(db_url)

    with pytest.raises(ValueError):
        store.replace_for_user(1, [_rec(2, 0.9)])
