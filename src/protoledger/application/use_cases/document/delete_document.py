"""Delete document use case."""

import logging
from uuid import UUID

from protoledger.domain.exceptions import NotFound

logger = logging.getLogger(__name__)


class DeleteDocumentUseCase:
    """Hard delete a document together with its snapshot history."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, actor_id: str, document_id: UUID) -> None:
        async with self._uow_factory() as uow:
            deleted = await uow.documents.delete(document_id)
            if not deleted:
                raise NotFound("Document", str(document_id))
        logger.info("Document %s deleted by %s", document_id, actor_id)
