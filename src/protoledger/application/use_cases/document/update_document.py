"""Update document use case - optimistic concurrency on the version counter."""

import logging
from datetime import UTC, datetime
from uuid import UUID, uuid4

from protoledger.application.dto.document_dto import DocumentOutput, DocumentUpdateInput
from protoledger.application.ports import ContentFingerprinter
from protoledger.application.use_cases.document.content import (
    DEFAULT_MAX_PAYLOAD_BYTES,
    to_output,
    validate_content,
)
from protoledger.domain.entities import Document, VersionSnapshot
from protoledger.domain.exceptions import ConcurrentModification, NotFound, ValidationError

logger = logging.getLogger(__name__)


class UpdateDocumentUseCase:
    """Replace a document's content, archiving the outgoing state.

    The mutation is accepted only if the document is still at
    ``expected_version``. Within one unit of work:

    1. read the current document;
    2. swap: conditional UPDATE ... WHERE version = expected_version,
       bumping the version by one;
    3. archive: insert a snapshot of the state read in step 1, tagged with
       its version number.

    The conditional update takes the row lock, so a concurrent writer on the
    same document waits for it, then matches zero rows and fails with
    ConcurrentModification. Any failure rolls back both writes. There is no
    automatic retry.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        fingerprinter: ContentFingerprinter,
        max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._fingerprinter = fingerprinter
        self._max_payload_bytes = max_payload_bytes

    async def execute(
        self, actor_id: str, document_id: UUID, input_data: DocumentUpdateInput
    ) -> DocumentOutput:
        """Apply the update or raise ConcurrentModification."""
        expected = input_data.expected_version
        if isinstance(expected, bool) or not isinstance(expected, int) or expected < 1:
            raise ValidationError("expected_version must be a positive integer")
        text_blob, structured_payload = input_data.text_blob, input_data.structured_payload
        if text_blob is None or structured_payload is None:
            base = await self._read_base(document_id, expected)
            if text_blob is None:
                text_blob = base.text_blob or ""
            if structured_payload is None:
                structured_payload = base.structured_payload or {}
        validate_content(text_blob, structured_payload, self._max_payload_bytes)
        checksum = await self._fingerprinter.fingerprint(text_blob, structured_payload)

        async with self._uow_factory() as uow:
            current = await uow.documents.get_by_id(document_id)
            if not current:
                raise NotFound("Document", str(document_id))
            if current.version != expected:
                logger.info(
                    "Stale update on document %s: expected %s, current %s",
                    document_id,
                    expected,
                    current.version,
                )
                raise ConcurrentModification(document_id, expected, current.version)

            now = datetime.now(UTC)
            updated = await uow.documents.compare_and_swap(
                document_id,
                expected,
                text_blob=text_blob,
                structured_payload=structured_payload,
                content_checksum=checksum.value,
                updated_at=now,
            )
            if updated is None:
                latest = await uow.documents.get_by_id(document_id)
                if latest is None:
                    raise NotFound("Document", str(document_id))
                logger.info("Lost update race on document %s at version %s", document_id, expected)
                raise ConcurrentModification(document_id, expected, latest.version)

            await uow.versions.create(
                VersionSnapshot(
                    id=uuid4(),
                    document_id=current.id,
                    version_number=current.version,
                    text_blob=current.text_blob,
                    structured_payload=current.structured_payload,
                    content_checksum=current.content_checksum,
                    created_at=now,
                    created_by=actor_id,
                )
            )

        logger.debug("Document %s now at version %s", document_id, updated.version)
        return to_output(updated)

    async def _read_base(self, document_id: UUID, expected: int) -> Document:
        """Content stored at the expected version, used to fill omitted fields.

        Content at a given version is immutable; if the document moves past
        it before the swap, the conditional update rejects the write.
        """
        async with self._uow_factory() as uow:
            current = await uow.documents.get_by_id(document_id)
        if not current:
            raise NotFound("Document", str(document_id))
        if current.version != expected:
            raise ConcurrentModification(document_id, expected, current.version)
        return current
