"""List, get and relabel version use cases."""

from uuid import UUID

from protoledger.application.dto.version_dto import VersionPage
from protoledger.domain.entities import VersionSnapshot
from protoledger.domain.exceptions import NotFound, ValidationError


class ListVersionsUseCase:
    """Paginated version history, newest first.

    Page size is clamped server-side whatever the client asks for.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        default_page_size: int = 20,
        max_page_size: int = 100,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    async def execute(
        self, document_id: UUID, page: int | None = None, limit: int | None = None
    ) -> VersionPage:
        page = max(1, page or 1)
        limit = min(self._max_page_size, max(1, limit or self._default_page_size))
        offset = (page - 1) * limit

        async with self._uow_factory() as uow:
            document = await uow.documents.get_by_id(document_id)
            if not document:
                raise NotFound("Document", str(document_id))
            items, total = await uow.versions.list(document_id, offset=offset, limit=limit)

        return VersionPage(items=items, total=total, page=page, limit=limit)


class GetVersionUseCase:
    """Fetch one snapshot."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, document_id: UUID, version_number: int) -> VersionSnapshot:
        async with self._uow_factory() as uow:
            snapshot = await uow.versions.get(document_id, version_number)
        if not snapshot:
            raise NotFound("Version", str(version_number))
        return snapshot


class RelabelVersionUseCase:
    """Set or clear a snapshot's label (the only snapshot mutation)."""

    def __init__(self, unit_of_work_factory: type, max_label_length: int = 255) -> None:
        self._uow_factory = unit_of_work_factory
        self._max_label_length = max_label_length

    async def execute(
        self, document_id: UUID, version_number: int, label: str | None
    ) -> VersionSnapshot:
        if label is not None and not isinstance(label, str):
            raise ValidationError("label must be a string or null")
        label = (label or "").strip() or None
        if label and len(label) > self._max_label_length:
            raise ValidationError(
                f"label must be at most {self._max_label_length} characters"
            )

        async with self._uow_factory() as uow:
            snapshot = await uow.versions.update_label(document_id, version_number, label)
        if not snapshot:
            raise NotFound("Version", str(version_number))
        return snapshot
