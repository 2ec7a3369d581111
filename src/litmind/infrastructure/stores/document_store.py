from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select

from litmind.domain.document import AnalysisStatus, Document, DocumentAnalysis
from litmind.infrastructure.stores.models import Base, DocumentAnalysisModel, DocumentModel
from litmind.infrastructure.stores.sqlalchemy_db import SessionProvider, get_db_url


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentStore:
    """
    Document metadata and analysis summaries.

    The recommendation engine only reads through ``DocumentStorePort``; the
    write methods here serve the upload and analysis pipeline and tests.
    """

    def __init__(self, db_url: Optional[str] = None, *, auto_create_schema: bool = True):
        self.db_url = db_url or get_db_url()
        self._provider = SessionProvider(self.db_url)
        if auto_create_schema:
            Base.metadata.create_all(self._provider.engine)

    def add_document(
        self,
        *,
        owner_id: int,
        name: str,
        file_type: str = "",
        mime_type: Optional[str] = None,
        is_shareable: bool = False,
        group_id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ) -> Document:
        with self._provider.session() as session:
            row = DocumentModel(
                owner_id=int(owner_id),
                name=name or "",
                file_type=file_type or "",
                mime_type=mime_type,
                is_shareable=bool(is_shareable),
                group_id=group_id,
                created_at=created_at or _utcnow(),
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._row_to_document(row)

    def save_analysis(
        self,
        document_id: int,
        *,
        status: AnalysisStatus = AnalysisStatus.COMPLETED,
        background: Optional[str] = None,
        content: Optional[str] = None,
        results: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> DocumentAnalysis:
        """Create or replace the analysis summary of one document."""
        with self._provider.session() as session:
            row = session.execute(
                select(DocumentAnalysisModel).where(
                    DocumentAnalysisModel.document_id == int(document_id)
                )
            ).scalar_one_or_none()
            if row is None:
                row = DocumentAnalysisModel(document_id=int(document_id))
                session.add(row)
            row.status = AnalysisStatus(status).value
            row.background = background
            row.content = content
            row.results = results
            row.notes = notes
            row.updated_at = _utcnow()
            session.commit()
            session.refresh(row)
            return self._row_to_analysis(row)

    def get(self, document_id: int) -> Optional[Document]:
        with self._provider.session() as session:
            row = session.get(DocumentModel, int(document_id))
            return self._row_to_document(row) if row else None

    def list_by_owner(self, owner_id: int) -> List[Document]:
        with self._provider.session() as session:
            rows = session.execute(
                select(DocumentModel)
                .where(DocumentModel.owner_id == int(owner_id))
                .order_by(DocumentModel.created_at.desc(), DocumentModel.id.desc())
            ).scalars().all()
            return [self._row_to_document(r) for r in rows]

    def list_shareable(self, *, group_id: Optional[int] = None) -> List[Document]:
        with self._provider.session() as session:
            stmt = select(DocumentModel).where(DocumentModel.is_shareable.is_(True))
            if group_id is not None:
                stmt = stmt.where(DocumentModel.group_id == int(group_id))
            rows = session.execute(
                stmt.order_by(DocumentModel.created_at.desc(), DocumentModel.id.desc())
            ).scalars().all()
            return [self._row_to_document(r) for r in rows]

    def get_analysis(self, document_id: int) -> Optional[DocumentAnalysis]:
        with self._provider.session() as session:
            row = session.execute(
                select(DocumentAnalysisModel).where(
                    DocumentAnalysisModel.document_id == int(document_id)
                )
            ).scalar_one_or_none()
            return self._row_to_analysis(row) if row else None

    def close(self) -> None:
        self._provider.engine.dispose()

    @staticmethod
    def _row_to_document(row: DocumentModel) -> Document:
        return Document(
            id=int(row.id),
            owner_id=int(row.owner_id),
            name=row.name or "",
            created_at=row.created_at,
            file_type=row.file_type or "",
            mime_type=row.mime_type,
            is_shareable=bool(row.is_shareable),
            group_id=row.group_id,
        )

    @staticmethod
    def _row_to_analysis(row: DocumentAnalysisModel) -> DocumentAnalysis:
        try:
            status = AnalysisStatus(row.status)
        except ValueError:
            status = AnalysisStatus.PENDING
        return DocumentAnalysis(
            document_id=int(row.document_id),
            status=status,
            background=row.background,
            content=row.content,
            results=row.results,
            notes=row.notes,
        )
