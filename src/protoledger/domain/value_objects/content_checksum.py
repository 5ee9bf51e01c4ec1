"""Content checksum for integrity and equality checks."""

import re
from dataclasses import dataclass

_HEX_SHA256 = re.compile(r"[0-9a-f]{64}")


@dataclass(frozen=True)
class ContentChecksum:
    """Lowercase hex SHA-256 digest of document content."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not _HEX_SHA256.fullmatch(self.value):
            raise ValueError("Checksum must be 64 lowercase hex characters")

    def __str__(self) -> str:
        return self.value
