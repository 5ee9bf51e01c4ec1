"""Restore version use case."""

from uuid import UUID

from protoledger.application.dto.document_dto import DocumentOutput, DocumentUpdateInput
from protoledger.application.use_cases.document.update_document import UpdateDocumentUseCase
from protoledger.domain.exceptions import NotFound


class RestoreVersionUseCase:
    """Make a snapshot's content current again.

    Restoring is forward-only: it goes through the regular versioned update,
    producing a new, higher version and archiving the pre-restore state.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        update_document: UpdateDocumentUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._update_document = update_document

    async def execute(
        self,
        actor_id: str,
        document_id: UUID,
        version_number: int,
        expected_version: int | None = None,
    ) -> DocumentOutput:
        async with self._uow_factory() as uow:
            document = await uow.documents.get_by_id(document_id)
            if not document:
                raise NotFound("Document", str(document_id))
            snapshot = await uow.versions.get(document_id, version_number)
            if not snapshot:
                raise NotFound("Version", str(version_number))
            if expected_version is None:
                expected_version = document.version

        return await self._update_document.execute(
            actor_id,
            document_id,
            DocumentUpdateInput(
                text_blob=snapshot.text_blob or "",
                structured_payload=snapshot.structured_payload or {},
                expected_version=expected_version,
            ),
        )
