"""DocumentStorePort: read-only view of internally stored documents."""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from litmind.domain.document import Document, DocumentAnalysis


@runtime_checkable
class DocumentStorePort(Protocol):
    def get(self, document_id: int) -> Optional[Document]: ...

    def list_by_owner(self, owner_id: int) -> List[Document]: ...

    def list_shareable(self, *, group_id: Optional[int] = None) -> List[Document]: ...

    def get_analysis(self, document_id: int) -> Optional[DocumentAnalysis]: ...
