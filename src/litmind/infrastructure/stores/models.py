from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class DocumentModel(Base):
    """Uploaded document metadata. Binary content lives outside the database."""

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(Integer, index=True)
    name: Mapped[str] = mapped_column(String(512), default="")
    file_type: Mapped[str] = mapped_column(String(64), default="")
    mime_type: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    is_shareable: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    group_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)


class DocumentAnalysisModel(Base):
    __tablename__ = "document_analyses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    document_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("documents.id"), unique=True, index=True
    )
    status: Mapped[str] = mapped_column(String(16), default="PENDING")

    background: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    results: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class UserBehaviorModel(Base):
    """Append-only log of tracked user actions."""

    __tablename__ = "user_behaviors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True)
    document_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    behavior_type: Mapped[str] = mapped_column(String(32), index=True)

    payload_json: Mapped[str] = mapped_column(Text, default="{}")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    def set_payload(self, data: Dict[str, Any]) -> None:
        self.payload_json = json.dumps(data or {}, ensure_ascii=False)

    def get_payload(self) -> Dict[str, Any]:
        try:
            value = json.loads(self.payload_json or "{}")
        except ValueError:
            return {}
        return value if isinstance(value, dict) else {}


class RecommendationModel(Base):
    __tablename__ = "recommendations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True)

    # Exactly one of these two is set.
    recommended_document_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    external_paper_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    title: Mapped[str] = mapped_column(String(1024), default="")
    authors: Mapped[str] = mapped_column(Text, default="")
    source_label: Mapped[str] = mapped_column(String(64), default="")
    url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    reason: Mapped[str] = mapped_column(String(255), default="")
    score: Mapped[float] = mapped_column(Float, default=0.0)
    feedback: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
