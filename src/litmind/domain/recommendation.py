# src/litmind/domain/recommendation.py
"""
Recommendation domain models.

- Recommendation: one ranked suggestion owned by a single user
- RecommendationError and subclasses: failures surfaced to callers
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

FEEDBACK_MAX_LENGTH = 20
INTERNAL_SOURCE_LABEL = "Internal document"


class RecommendationError(Exception):
    """Base class for user-visible recommendation failures."""


class RecommendationNotFoundError(RecommendationError):
    def __init__(self, recommendation_id: int):
        super().__init__(f"Recommendation {recommendation_id} not found")
        self.recommendation_id = recommendation_id


class RecommendationAccessDeniedError(RecommendationError):
    def __init__(self, recommendation_id: int, user_id: int):
        super().__init__(f"User {user_id} may not modify recommendation {recommendation_id}")
        self.recommendation_id = recommendation_id
        self.user_id = user_id


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def normalize_feedback(feedback: Optional[str]) -> str:
    text = (feedback or "").strip()
    if not text:
        raise ValueError("feedback must not be blank")
    if len(text) > FEEDBACK_MAX_LENGTH:
        raise ValueError(f"feedback must be at most {FEEDBACK_MAX_LENGTH} characters")
    return text


@dataclass(frozen=True)
class Recommendation:
    """
    A ranked suggestion for one user.

    Exactly one of ``recommended_document_id`` (internal document) and
    ``external_paper_id`` (external paper) is set. ``id`` and ``created_at``
    are assigned by the store on insert.
    """

    user_id: int
    title: str
    score: float
    reason: str
    source_label: str = ""
    authors: str = ""
    url: Optional[str] = None
    recommended_document_id: Optional[int] = None
    external_paper_id: Optional[str] = None
    feedback: Optional[str] = None
    created_at: Optional[datetime] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        has_document = self.recommended_document_id is not None
        has_external = bool(self.external_paper_id)
        if has_document == has_external:
            raise ValueError(
                "exactly one of recommended_document_id/external_paper_id must be set"
            )
        if not 0.0 <= float(self.score) <= 1.0:
            raise ValueError(f"score out of range [0, 1]: {self.score}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "recommended_document_id": self.recommended_document_id,
            "external_paper_id": self.external_paper_id,
            "title": self.title,
            "authors": self.authors,
            "source_label": self.source_label,
            "url": self.url,
            "reason": self.reason,
            "score": self.score,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "feedback": self.feedback,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recommendation":
        document_id = data.get("recommended_document_id")
        return cls(
            id=data.get("id"),
            user_id=int(data["user_id"]),
            recommended_document_id=int(document_id) if document_id is not None else None,
            external_paper_id=data.get("external_paper_id") or None,
            title=data.get("title") or "",
            authors=data.get("authors") or "",
            source_label=data.get("source_label") or "",
            url=data.get("url"),
            reason=data.get("reason") or "",
            score=float(data.get("score") or 0.0),
            created_at=_parse_datetime(data.get("created_at")),
            feedback=data.get("feedback"),
        )
