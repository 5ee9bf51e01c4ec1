"""Application ports - interfaces for external adapters."""

from protoledger.application.ports.fingerprinter import ContentFingerprinter, DigestBackend
from protoledger.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "ContentFingerprinter",
    "DigestBackend",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
