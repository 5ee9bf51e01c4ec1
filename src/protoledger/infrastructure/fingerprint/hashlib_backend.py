"""In-process SHA-256 digest backend."""

import hashlib


class HashlibDigestBackend:
    """Computes SHA-256 with the interpreter's hashlib."""

    async def sha256_hex(self, data: bytes) -> str:
        return hashlib.sha256(data).hexdigest()
