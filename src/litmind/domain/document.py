"""Internal document value objects (read-only views of the document store)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class AnalysisStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class Document:
    """An internally stored document owned by one user."""

    id: int
    owner_id: int
    name: str
    created_at: datetime
    file_type: str = ""
    mime_type: Optional[str] = None
    is_shareable: bool = False
    group_id: Optional[int] = None

    @property
    def url(self) -> str:
        return f"/pdf/{self.id}"


@dataclass(frozen=True)
class DocumentAnalysis:
    """Summarized analysis of one document, produced by the analysis pipeline."""

    document_id: int
    status: AnalysisStatus = AnalysisStatus.PENDING
    background: Optional[str] = None
    content: Optional[str] = None
    results: Optional[str] = None
    notes: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == AnalysisStatus.COMPLETED

    def topic_text(self) -> str:
        """Concatenate the analysis sections into one topic text."""
        parts = [self.background, self.content, self.results, self.notes]
        return " ".join(p for p in parts if p).strip()


def is_pdf_document(document: Optional[Document]) -> bool:
    """Recognize PDF documents by declared type, MIME value, or filename suffix."""
    if document is None:
        return False
    if document.file_type and "pdf" in document.file_type.lower():
        return True
    if document.mime_type and "pdf" in document.mime_type.lower():
        return True
    if document.name and document.name.lower().endswith(".pdf"):
        return True
    return False
