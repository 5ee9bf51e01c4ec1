"""Domain exceptions."""


class ProtoLedgerError(Exception):
    """Base exception for protoledger."""

    pass


class NotFound(ProtoLedgerError):
    """Requested resource was not found."""

    def __init__(self, resource: str, identifier: str | None = None) -> None:
        self.resource = resource
        self.identifier = identifier
        if identifier is None:
            super().__init__(f"{resource} not found")
        else:
            super().__init__(f"{resource} '{identifier}' not found")


class ValidationError(ProtoLedgerError):
    """Validation failed for input data."""

    pass


class ConcurrentModification(ProtoLedgerError):
    """Expected-version precondition failed; reload and retry."""

    def __init__(
        self,
        document_id: object,
        expected_version: int,
        current_version: int | None = None,
    ) -> None:
        self.document_id = document_id
        self.expected_version = expected_version
        self.current_version = current_version
        super().__init__(
            f"Document '{document_id}' was modified concurrently "
            f"(expected version {expected_version}, current {current_version})"
        )


class SnapshotConflict(ProtoLedgerError):
    """A snapshot with the same document and version number already exists."""

    def __init__(self, document_id: object, version_number: int) -> None:
        self.document_id = document_id
        self.version_number = version_number
        super().__init__(
            f"Snapshot for document '{document_id}' at version {version_number} already exists"
        )


class StorageUnavailable(ProtoLedgerError):
    """Storage call failed with a transient error (connection loss, timeout)."""

    pass
