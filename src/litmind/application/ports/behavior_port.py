"""BehaviorLogPort: append-only user behavior log."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from litmind.domain.behavior import BehaviorType, UserBehaviorEvent


@runtime_checkable
class BehaviorLogPort(Protocol):
    def append(
        self,
        *,
        user_id: int,
        behavior_type: BehaviorType,
        document_id: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> UserBehaviorEvent: ...

    def list_for_user(self, user_id: int) -> List[UserBehaviorEvent]:
        """Events of one user, newest first."""
        ...

    def list_for_document(self, document_id: int) -> List[UserBehaviorEvent]:
        """Events against one document, in no particular order."""
        ...
