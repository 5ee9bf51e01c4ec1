"""Get and list document use cases."""

from uuid import UUID

from protoledger.application.dto.document_dto import DocumentListItem, DocumentOutput
from protoledger.application.use_cases.document.content import to_output
from protoledger.domain.exceptions import NotFound


class GetDocumentUseCase:
    """Get document by id."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, document_id: UUID) -> DocumentOutput:
        async with self._uow_factory() as uow:
            document = await uow.documents.get_by_id(document_id)
            if not document:
                raise NotFound("Document", str(document_id))
        return to_output(document)


class ListDocumentsUseCase:
    """List documents with cursor pagination, without content."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, cursor: str | None = None, limit: int = 20
    ) -> tuple[list[DocumentListItem], str | None]:
        async with self._uow_factory() as uow:
            documents, next_cursor = await uow.documents.list(cursor=cursor, limit=limit)
        items = [
            DocumentListItem(
                id=d.id,
                version=d.version,
                content_checksum=d.content_checksum,
                created_at=d.created_at,
                updated_at=d.updated_at,
                created_by=d.created_by,
            )
            for d in documents
        ]
        return items, next_cursor
