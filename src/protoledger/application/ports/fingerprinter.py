"""Content fingerprinter and digest backend ports."""

from typing import Any, Protocol

from protoledger.domain.value_objects import ContentChecksum


class DigestBackend(Protocol):
    """SHA-256 primitive."""

    async def sha256_hex(self, data: bytes) -> str: ...


class ContentFingerprinter(Protocol):
    """Maps (text_blob, structured_payload) to a fixed-length checksum."""

    async def fingerprint(self, text_blob: str, structured_payload: Any) -> ContentChecksum: ...
