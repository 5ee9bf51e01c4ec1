"""Repository ports."""

from protoledger.application.ports.repositories.document_repository import (
    DocumentRepository,
)
from protoledger.application.ports.repositories.version_repository import (
    VersionRepository,
)

__all__ = [
    "DocumentRepository",
    "VersionRepository",
]
