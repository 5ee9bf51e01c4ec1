"""Domain value objects."""

from protoledger.domain.value_objects.content_checksum import ContentChecksum
from protoledger.domain.value_objects.version_ref import CURRENT, VersionRef

__all__ = [
    "CURRENT",
    "ContentChecksum",
    "VersionRef",
]
