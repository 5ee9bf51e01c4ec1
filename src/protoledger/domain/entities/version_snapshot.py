"""Version snapshot entity."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass
class VersionSnapshot:
    """Immutable archived copy of a document as of a prior version.

    Only ``label`` may change after creation.
    """

    id: UUID
    document_id: UUID
    version_number: int
    text_blob: str
    structured_payload: Any
    content_checksum: str
    created_at: datetime
    created_by: str | None = None
    label: str | None = None


@dataclass
class VersionSummary:
    """Snapshot row without content, for history listings."""

    id: UUID
    version_number: int
    content_checksum: str
    created_at: datetime
    created_by: str | None = None
    label: str | None = None
