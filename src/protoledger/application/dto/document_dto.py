"""Document DTOs."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass
class DocumentCreateInput:
    """Input for creating a document."""

    text_blob: str = ""
    structured_payload: Any = field(default_factory=dict)


@dataclass
class DocumentUpdateInput:
    """Input for a versioned update: new content plus the version it was based on.

    A None content field keeps the value stored at ``expected_version``.
    """

    text_blob: str | None
    structured_payload: Any
    expected_version: int


@dataclass
class DocumentOutput:
    """Output DTO for document."""

    id: UUID
    text_blob: str
    structured_payload: Any
    version: int
    content_checksum: str
    created_at: datetime
    updated_at: datetime
    created_by: str | None = None


@dataclass
class DocumentListItem:
    """Document row without content."""

    id: UUID
    version: int
    content_checksum: str
    created_at: datetime
    updated_at: datetime
    created_by: str | None = None
