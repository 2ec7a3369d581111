from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from litmind.domain.behavior import BehaviorType, UserBehaviorEvent
from litmind.infrastructure.stores.models import Base, UserBehaviorModel
from litmind.infrastructure.stores.sqlalchemy_db import SessionProvider, get_db_url

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BehaviorStore:
    """Append-only user behavior log. Rows are never updated or deleted."""

    def __init__(self, db_url: Optional[str] = None, *, auto_create_schema: bool = True):
        self.db_url = db_url or get_db_url()
        self._provider = SessionProvider(self.db_url)
        if auto_create_schema:
            Base.metadata.create_all(self._provider.engine)

    def append(
        self,
        *,
        user_id: int,
        behavior_type: BehaviorType,
        document_id: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> UserBehaviorEvent:
        behavior_type = BehaviorType.parse(behavior_type)
        with self._provider.session() as session:
            row = UserBehaviorModel(
                user_id=int(user_id),
                document_id=int(document_id) if document_id is not None else None,
                behavior_type=behavior_type.value,
                created_at=_utcnow(),
            )
            row.set_payload(payload or {})
            session.add(row)
            session.commit()
            session.refresh(row)
            logger.debug(
                "Recorded %s for user %s on document %s", behavior_type.value, user_id, document_id
            )
            return self._row_to_event(row)

    def list_for_user(self, user_id: int) -> List[UserBehaviorEvent]:
        with self._provider.session() as session:
            rows = session.execute(
                select(UserBehaviorModel)
                .where(UserBehaviorModel.user_id == int(user_id))
                .order_by(UserBehaviorModel.created_at.desc(), UserBehaviorModel.id.desc())
            ).scalars().all()
            return [self._row_to_event(r) for r in rows]

    def list_for_document(self, document_id: int) -> List[UserBehaviorEvent]:
        with self._provider.session() as session:
            rows = session.execute(
                select(UserBehaviorModel).where(UserBehaviorModel.document_id == int(document_id))
            ).scalars().all()
            return [self._row_to_event(r) for r in rows]

    def close(self) -> None:
        self._provider.engine.dispose()

    @staticmethod
    def _row_to_event(row: UserBehaviorModel) -> UserBehaviorEvent:
        return UserBehaviorEvent(
            id=int(row.id),
            user_id=int(row.user_id),
            document_id=row.document_id,
            behavior_type=BehaviorType.parse(row.behavior_type),
            payload=row.get_payload(),
            created_at=row.created_at,
        )
