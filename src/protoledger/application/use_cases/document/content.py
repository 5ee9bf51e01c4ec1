"""Shared helpers for document use cases."""

from typing import Any

from protoledger.application.dto.document_dto import DocumentOutput
from protoledger.domain.canonical_json import serialized_size
from protoledger.domain.entities import Document
from protoledger.domain.exceptions import ValidationError

# 5 MiB, same bound the editor's project data had
DEFAULT_MAX_PAYLOAD_BYTES = 5 * 1024 * 1024


def validate_content(
    text_blob: Any,
    structured_payload: Any,
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
) -> None:
    """Check content shape and payload size."""
    if not isinstance(text_blob, str):
        raise ValidationError("text_blob must be a string")
    try:
        text_blob.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValidationError(f"text_blob is not valid UTF-8 text: {e.reason}") from e
    if not isinstance(structured_payload, dict):
        raise ValidationError("structured_payload must be an object")
    try:
        size = serialized_size(structured_payload)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"structured_payload is not valid JSON: {e}") from e
    if size > max_payload_bytes:
        raise ValidationError(
            f"structured_payload exceeds maximum size of {max_payload_bytes // (1024 * 1024)}MB"
        )


def to_output(document: Document) -> DocumentOutput:
    return DocumentOutput(
        id=document.id,
        text_blob=document.text_blob,
        structured_payload=document.structured_payload,
        version=document.version,
        content_checksum=document.content_checksum,
        created_at=document.created_at,
        updated_at=document.updated_at,
        created_by=document.created_by,
    )
