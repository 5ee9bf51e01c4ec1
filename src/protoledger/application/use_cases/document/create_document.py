"""Create document use case."""

from datetime import UTC, datetime
from uuid import uuid4

from protoledger.application.dto.document_dto import DocumentCreateInput, DocumentOutput
from protoledger.application.ports import ContentFingerprinter
from protoledger.application.use_cases.document.content import (
    DEFAULT_MAX_PAYLOAD_BYTES,
    to_output,
    validate_content,
)
from protoledger.domain.entities import Document


class CreateDocumentUseCase:
    """Create a document at version 1 with no history."""

    def __init__(
        self,
        unit_of_work_factory: type,
        fingerprinter: ContentFingerprinter,
        max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._fingerprinter = fingerprinter
        self._max_payload_bytes = max_payload_bytes

    async def execute(self, actor_id: str, input_data: DocumentCreateInput) -> DocumentOutput:
        """Create document."""
        validate_content(
            input_data.text_blob, input_data.structured_payload, self._max_payload_bytes
        )
        checksum = await self._fingerprinter.fingerprint(
            input_data.text_blob, input_data.structured_payload
        )

        now = datetime.now(UTC)
        document = Document(
            id=uuid4(),
            text_blob=input_data.text_blob,
            structured_payload=input_data.structured_payload,
            version=1,
            content_checksum=checksum.value,
            created_at=now,
            updated_at=now,
            created_by=actor_id,
        )
        async with self._uow_factory() as uow:
            await uow.documents.create(document)

        return to_output(document)
