"""Compare versions use case."""

from uuid import UUID

from protoledger.application.dto.version_dto import ComparisonSide, VersionComparison
from protoledger.domain.exceptions import NotFound
from protoledger.domain.value_objects import CURRENT, VersionRef


class CompareVersionsUseCase:
    """Fetch two text blobs for client-side diffing.

    Only text is returned; structured payloads can be large and are not
    needed by the comparison view.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, document_id: UUID, version_a: int, version_b: VersionRef
    ) -> VersionComparison:
        async with self._uow_factory() as uow:
            document = await uow.documents.get_by_id(document_id)
            if not document:
                raise NotFound("Document", str(document_id))

            a = await uow.versions.get_text(document_id, version_a)
            if not a:
                raise NotFound("Version", str(version_a))

            if version_b.is_current:
                side_b = ComparisonSide(version_number=CURRENT, text_blob=document.text_blob)
            else:
                b = await uow.versions.get_text(document_id, version_b.number)
                if not b:
                    raise NotFound("Version", str(version_b.number))
                side_b = ComparisonSide(version_number=b[0], text_blob=b[1])

        return VersionComparison(
            a=ComparisonSide(version_number=a[0], text_blob=a[1]),
            b=side_b,
        )
