"""Canonical serialization and content fingerprinting."""

import hashlib
import logging

from psycopg_pool import AsyncConnectionPool

from protoledger.application.ports import DigestBackend
from protoledger.domain.canonical_json import (
    canonical_dumps,
    serialized_size,
)
from protoledger.infrastructure.fingerprint.hashlib_backend import HashlibDigestBackend
from protoledger.infrastructure.fingerprint.postgres_backend import PostgresDigestBackend
from protoledger.infrastructure.fingerprint.sha256_fingerprinter import Sha256Fingerprinter

logger = logging.getLogger(__name__)


def select_digest_backend(
    name: str = "auto", pool: AsyncConnectionPool | None = None
) -> DigestBackend:
    """Pick a digest backend by name; ``auto`` detects what the runtime offers."""
    if name == "auto":
        name = "hashlib" if "sha256" in hashlib.algorithms_available else "postgres"
        logger.info("Digest backend auto-selected: %s", name)
    if name == "hashlib":
        return HashlibDigestBackend()
    if name == "postgres":
        if pool is None:
            raise ValueError("postgres digest backend requires a connection pool")
        return PostgresDigestBackend(pool)
    raise ValueError(f"Unknown digest backend: {name}")


__all__ = [
    "HashlibDigestBackend",
    "PostgresDigestBackend",
    "Sha256Fingerprinter",
    "canonical_dumps",
    "select_digest_backend",
    "serialized_size",
]
