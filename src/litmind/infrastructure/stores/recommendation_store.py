from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import delete, select

from litmind.domain.recommendation import Recommendation
from litmind.infrastructure.stores.models import Base, RecommendationModel
from litmind.infrastructure.stores.sqlalchemy_db import SessionProvider, get_db_url


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecommendationStore:
    """Per-user recommendation batches, replaced wholesale on regeneration."""

    def __init__(self, db_url: Optional[str] = None, *, auto_create_schema: bool = True):
        self.db_url = db_url or get_db_url()
        self._provider = SessionProvider(self.db_url)
        if auto_create_schema:
            Base.metadata.create_all(self._provider.engine)

    def delete_all_for_user(self, user_id: int) -> int:
        with self._provider.session() as session:
            result = session.execute(
                delete(RecommendationModel).where(RecommendationModel.user_id == int(user_id))
            )
            session.commit()
            return int(result.rowcount or 0)

    def replace_for_user(
        self, user_id: int, recommendations: Sequence[Recommendation]
    ) -> List[Recommendation]:
        """
        Replace every row of ``user_id`` with ``recommendations`` in one transaction.

        Rows written by a concurrent regeneration in another process are removed
        too, so exactly one batch survives. Returns the rows with ids assigned.
        """
        user_id = int(user_id)
        if any(int(r.user_id) != user_id for r in recommendations):
            raise ValueError(f"batch contains recommendations of users other than {user_id}")
        now = _utcnow()
        with self._provider.session() as session:
            session.execute(
                delete(RecommendationModel).where(RecommendationModel.user_id == user_id)
            )
            rows = [
                RecommendationModel(
                    user_id=user_id,
                    recommended_document_id=r.recommended_document_id,
                    external_paper_id=r.external_paper_id,
                    title=r.title or "",
                    authors=r.authors or "",
                    source_label=r.source_label or "",
                    url=r.url,
                    reason=r.reason or "",
                    score=float(r.score),
                    feedback=r.feedback,
                    created_at=r.created_at or now,
                )
                for r in recommendations
            ]
            session.add_all(rows)
            session.commit()
            for row in rows:
                session.refresh(row)
            return [self._row_to_recommendation(r) for r in rows]

    def list_for_user(self, user_id: int) -> List[Recommendation]:
        with self._provider.session() as session:
            rows = session.execute(
                select(RecommendationModel)
                .where(RecommendationModel.user_id == int(user_id))
                .order_by(RecommendationModel.score.desc(), RecommendationModel.id.asc())
            ).scalars().all()
            return [self._row_to_recommendation(r) for r in rows]

    def get(self, recommendation_id: int) -> Optional[Recommendation]:
        with self._provider.session() as session:
            row = session.get(RecommendationModel, int(recommendation_id))
            return self._row_to_recommendation(row) if row else None

    def update_feedback(self, recommendation_id: int, feedback: str) -> Optional[Recommendation]:
        with self._provider.session() as session:
            row = session.get(RecommendationModel, int(recommendation_id))
            if row is None:
                return None
            row.feedback = feedback
            session.commit()
            session.refresh(row)
            return self._row_to_recommendation(row)

    def close(self) -> None:
        self._provider.engine.dispose()

    @staticmethod
    def _row_to_recommendation(row: RecommendationModel) -> Recommendation:
        created_at = row.created_at
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return Recommendation(
            id=int(row.id),
            user_id=int(row.user_id),
            recommended_document_id=row.recommended_document_id,
            external_paper_id=row.external_paper_id,
            title=row.title or "",
            authors=row.authors or "",
            source_label=row.source_label or "",
            url=row.url,
            reason=row.reason or "",
            score=float(row.score or 0.0),
            feedback=row.feedback,
            created_at=created_at,
        )
