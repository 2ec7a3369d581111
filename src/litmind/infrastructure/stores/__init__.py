from .behavior_store import BehaviorStore
from .document_store import DocumentStore
from .recommendation_store import RecommendationStore
from .sqlalchemy_db import SessionProvider, get_db_url

__all__ = [
    "BehaviorStore",
    "DocumentStore",
    "RecommendationStore",
    "SessionProvider",
    "get_db_url",
]
