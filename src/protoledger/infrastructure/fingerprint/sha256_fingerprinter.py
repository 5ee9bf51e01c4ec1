"""SHA-256 content fingerprinter."""

from typing import Any

from protoledger.application.ports import DigestBackend
from protoledger.domain.canonical_json import canonical_dumps
from protoledger.domain.value_objects import ContentChecksum
from protoledger.infrastructure.fingerprint.hashlib_backend import HashlibDigestBackend


class Sha256Fingerprinter:
    """digest = SHA256(canonical(text_blob) + canonical(structured_payload))."""

    def __init__(self, backend: DigestBackend | None = None) -> None:
        self._backend = backend or HashlibDigestBackend()

    async def fingerprint(self, text_blob: str, structured_payload: Any) -> ContentChecksum:
        """Compute the checksum for a document's content pair."""
        data = canonical_dumps(text_blob) + canonical_dumps(structured_payload)
        digest = await self._backend.sha256_hex(data.encode("utf-8"))
        return ContentChecksum(digest)
