"""Domain entities."""

from protoledger.domain.entities.document import Document
from protoledger.domain.entities.version_snapshot import VersionSnapshot, VersionSummary

__all__ = [
    "Document",
    "VersionSnapshot",
    "VersionSummary",
]
