"""Domain value objects for the recommendation engine."""

from .behavior import BehaviorType, UserBehaviorEvent
from .document import AnalysisStatus, Document, DocumentAnalysis, is_pdf_document
from .paper import PaperCandidate, normalize_title
from .recommendation import (
    Recommendation,
    RecommendationAccessDeniedError,
    RecommendationError,
    RecommendationNotFoundError,
)

__all__ = [
    "AnalysisStatus",
    "BehaviorType",
    "Document",
    "DocumentAnalysis",
    "PaperCandidate",
    "Recommendation",
    "RecommendationAccessDeniedError",
    "RecommendationError",
    "RecommendationNotFoundError",
    "UserBehaviorEvent",
    "is_pdf_document",
    "normalize_title",
]
