from litmind.application.services.candidate_merger import CandidateMerger
from litmind.application.services.deferred_trigger import DeferredGenerationScheduler
from litmind.application.services.recommendation_service import RecommendationService
from litmind.application.services.topic_extractor import TopicExtractor

__all__ = [
    "CandidateMerger",
    "DeferredGenerationScheduler",
    "RecommendationService",
    "TopicExtractor",
]
