"""User behavior domain value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class BehaviorType(str, Enum):
    VIEW = "VIEW"
    ANALYZE = "ANALYZE"
    UPLOAD = "UPLOAD"

    @classmethod
    def parse(cls, value: Any) -> "BehaviorType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            raise ValueError(f"Unknown behavior type: {value!r}") from None


# Behavior types that count towards a document's popularity.
POPULARITY_BEHAVIORS = frozenset({BehaviorType.VIEW, BehaviorType.ANALYZE})


@dataclass(frozen=True)
class UserBehaviorEvent:
    """Immutable, append-only record of a tracked user action."""

    user_id: int
    behavior_type: BehaviorType
    document_id: Optional[int] = None
    payload: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    id: Optional[int] = None

    @property
    def counts_towards_popularity(self) -> bool:
        return self.behavior_type in POPULARITY_BEHAVIORS
