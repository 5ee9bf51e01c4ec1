"""Version snapshot repository port."""

from typing import Protocol
from uuid import UUID

from protoledger.domain.entities import VersionSnapshot, VersionSummary


class VersionRepository(Protocol):
    """Port for the append-only snapshot history of documents."""

    async def create(self, snapshot: VersionSnapshot) -> VersionSnapshot:
        """Insert snapshot. Raises SnapshotConflict if the version number is taken."""
        ...

    async def list(
        self,
        document_id: UUID,
        *,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[VersionSummary], int]:
        """Page of summaries ordered by version_number descending, plus total count."""
        ...

    async def get(self, document_id: UUID, version_number: int) -> VersionSnapshot | None: ...

    async def update_label(
        self, document_id: UUID, version_number: int, label: str | None
    ) -> VersionSnapshot | None: ...

    async def get_text(
        self, document_id: UUID, version_number: int
    ) -> tuple[int, str | None] | None: ...
