"""Document entity."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass
class Document:
    """Mutable versioned document: text blob, structured payload and version counter."""

    id: UUID
    text_blob: str
    structured_payload: Any
    version: int
    content_checksum: str
    created_at: datetime
    updated_at: datetime
    created_by: str | None = None
