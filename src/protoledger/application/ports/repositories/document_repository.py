"""Document repository port."""

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from protoledger.domain.entities import Document


class DocumentRepository(Protocol):
    """Port for document persistence."""

    async def get_by_id(self, document_id: UUID) -> Document | None: ...

    async def list(
        self,
        *,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[Document], str | None]: ...

    async def create(self, document: Document) -> Document: ...

    async def compare_and_swap(
        self,
        document_id: UUID,
        expected_version: int,
        *,
        text_blob: str,
        structured_payload: Any,
        content_checksum: str,
        updated_at: datetime,
    ) -> Document | None:
        """Set content and bump version only if version still equals expected_version.

        Returns the updated document, or None when no row matched.
        """
        ...

    async def delete(self, document_id: UUID) -> bool: ...
