from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Header, HTTPException
from pydantic import BaseModel, Field

from litmind.application.ports.trigger_port import GenerationTrigger
from litmind.application.services.recommendation_service import RecommendationService
from litmind.domain.behavior import BehaviorType
from litmind.domain.recommendation import (
    FEEDBACK_MAX_LENGTH,
    Recommendation,
    RecommendationAccessDeniedError,
    RecommendationNotFoundError,
)
from litmind.utils.logging_config import LogFiles, Logger, set_trace_id

router = APIRouter()

# Built lazily from the environment; tests monkeypatch these.
_service: Optional[RecommendationService] = None
_trigger: Optional[GenerationTrigger] = None


def _get_service() -> RecommendationService:
    global _service
    if _service is None:
        from litmind.infrastructure.adapters import build_recommendation_service

        _service = build_recommendation_service()
    return _service


def _get_trigger() -> GenerationTrigger:
    global _trigger
    if _trigger is None:
        from litmind.infrastructure.adapters import build_generation_trigger

        _trigger = build_generation_trigger(_get_service())
    return _trigger


async def shutdown_recommendations() -> None:
    """Cancel pending regenerations and release provider sessions."""
    global _service, _trigger
    if _trigger is not None:
        await _trigger.shutdown()
        _trigger = None
    if _service is not None:
        await _service.close()
        _service = None


class RecommendationItem(BaseModel):
    id: Optional[int] = None
    user_id: int
    recommended_document_id: Optional[int] = None
    external_paper_id: Optional[str] = None
    title: str
    authors: str = ""
    source_label: str = ""
    url: Optional[str] = None
    reason: str = ""
    score: float
    created_at: Optional[str] = None
    feedback: Optional[str] = None


class RecommendationListResponse(BaseModel):
    user_id: int
    items: List[RecommendationItem]


class FeedbackRequest(BaseModel):
    feedback: str = Field(..., min_length=1, max_length=FEEDBACK_MAX_LENGTH)


class BehaviorRequest(BaseModel):
    behavior_type: str = Field(..., min_length=1, max_length=32)
    document_id: Optional[int] = None
    payload: Dict[str, Any] = Field(default_factory=dict)


class BehaviorResponse(BaseModel):
    id: Optional[int] = None
    user_id: int
    behavior_type: str
    document_id: Optional[int] = None
    regeneration_scheduled: bool = False


class RelevanceResponse(BaseModel):
    user_id: int
    document_id: int
    score: float


def _item(recommendation: Recommendation) -> RecommendationItem:
    return RecommendationItem(**recommendation.to_dict())


def _list_response(user_id: int, items: List[Recommendation]) -> RecommendationListResponse:
    return RecommendationListResponse(user_id=user_id, items=[_item(r) for r in items])


@router.get("/recommendations", response_model=RecommendationListResponse)
async def list_recommendations(x_user_id: int = Header(..., alias="X-User-Id")):
    items = await _get_service().get_recommendations(x_user_id)
    return _list_response(x_user_id, items)


@router.post("/recommendations/generate", response_model=RecommendationListResponse)
async def generate_recommendations(x_user_id: int = Header(..., alias="X-User-Id")):
    set_trace_id()
    Logger.info(f"Generate requested by user {x_user_id}", file=LogFiles.API)
    items = await _get_service().generate(x_user_id)
    return _list_response(x_user_id, items)


@router.put("/recommendations/{recommendation_id}/feedback", response_model=RecommendationItem)
async def update_feedback(
    recommendation_id: int,
    req: FeedbackRequest,
    x_user_id: int = Header(..., alias="X-User-Id"),
):
    try:
        updated = await _get_service().update_feedback(x_user_id, recommendation_id, req.feedback)
    except RecommendationNotFoundError:
        raise HTTPException(status_code=404, detail="Recommendation not found")
    except RecommendationAccessDeniedError:
        raise HTTPException(status_code=403, detail="Not allowed to modify this recommendation")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _item(updated)


@router.post("/recommendations/behaviors", response_model=BehaviorResponse)
async def record_behavior(req: BehaviorRequest, x_user_id: int = Header(..., alias="X-User-Id")):
    try:
        event = await asyncio.to_thread(
            _get_service().record_behavior,
            x_user_id,
            req.document_id,
            req.behavior_type,
            req.payload,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    scheduled = False
    if event.behavior_type == BehaviorType.ANALYZE:
        await _get_trigger().schedule(x_user_id)
        scheduled = True
        Logger.info(
            f"Regeneration scheduled for user {x_user_id} after analyzing document "
            f"{req.document_id}",
            file=LogFiles.API,
        )

    return BehaviorResponse(
        id=event.id,
        user_id=event.user_id,
        behavior_type=event.behavior_type.value,
        document_id=event.document_id,
        regeneration_scheduled=scheduled,
    )


@router.get("/recommendations/relevance/{document_id}", response_model=RelevanceResponse)
def document_relevance(document_id: int, x_user_id: int = Header(..., alias="X-User-Id")):
    score = _get_service().score_document_relevance(x_user_id, document_id)
    return RelevanceResponse(user_id=x_user_id, document_id=document_id, score=score)
