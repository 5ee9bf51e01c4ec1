"""Document API resources."""

from uuid import UUID

import falcon.asgi

from protoledger.application.dto.document_dto import (
    DocumentCreateInput,
    DocumentOutput,
    DocumentUpdateInput,
)
from protoledger.application.use_cases.document.create_document import CreateDocumentUseCase
from protoledger.application.use_cases.document.delete_document import DeleteDocumentUseCase
from protoledger.application.use_cases.document.get_document import (
    GetDocumentUseCase,
    ListDocumentsUseCase,
)
from protoledger.application.use_cases.document.update_document import UpdateDocumentUseCase
from protoledger.domain.exceptions import ConcurrentModification, NotFound, ValidationError
from protoledger.interfaces.api.retry import StorageRetry

CONFLICT_MESSAGE = "Document was modified concurrently. Please reload and try again."


def document_to_dict(d: DocumentOutput) -> dict:
    return {
        "id": str(d.id),
        "text_blob": d.text_blob,
        "structured_payload": d.structured_payload,
        "version": d.version,
        "content_checksum": d.content_checksum,
        "created_by": d.created_by,
        "created_at": d.created_at.isoformat(),
        "updated_at": d.updated_at.isoformat(),
    }


def version_etag(version: int) -> str:
    return f'"{version}"'


def _parse_if_match(value: str | None) -> int | None:
    """Version number from an If-Match header such as ``"3"`` or ``W/"3"``."""
    if not value:
        return None
    value = value.strip()
    if value.startswith("W/"):
        value = value[2:]
    try:
        return int(value.strip('"'))
    except ValueError:
        return None


def write_conflict(resp: falcon.asgi.Response, e: ConcurrentModification) -> None:
    resp.status = falcon.HTTP_409
    resp.media = {
        "error": CONFLICT_MESSAGE,
        "expected_version": e.expected_version,
        "current_version": e.current_version,
    }


def parse_document_id(document_id: str, resp: falcon.asgi.Response) -> UUID | None:
    """Parse path id; writes a 400 response and returns None when malformed."""
    try:
        return UUID(document_id)
    except ValueError:
        resp.status = falcon.HTTP_400
        resp.media = {"error": "Invalid document ID"}
        return None


class DocumentsResource:
    """GET/POST /v1/documents - list and create documents."""

    def __init__(
        self,
        create_document: CreateDocumentUseCase,
        list_documents: ListDocumentsUseCase,
        storage_retry: StorageRetry | None = None,
    ) -> None:
        self._create_document = create_document
        self._list_documents = list_documents
        self._retry = storage_retry or StorageRetry()

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List documents with cursor pagination."""
        cursor = req.get_param("cursor")
        limit = req.get_param_as_int("limit") or 20
        limit = min(max(limit, 1), 100)
        if cursor:
            try:
                UUID(cursor)
            except ValueError:
                resp.status = falcon.HTTP_400
                resp.media = {"error": "Invalid cursor"}
                return

        items, next_cursor = await self._retry(
            self._list_documents.execute, cursor=cursor, limit=limit
        )
        resp.media = {
            "items": [
                {
                    "id": str(d.id),
                    "version": d.version,
                    "content_checksum": d.content_checksum,
                    "created_by": d.created_by,
                    "created_at": d.created_at.isoformat(),
                    "updated_at": d.updated_at.isoformat(),
                }
                for d in items
            ],
            "next_cursor": next_cursor,
        }
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create document at version 1."""
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        body = await req.get_media(default_when_empty={})
        if not isinstance(body, dict):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Request body must be a JSON object"}
            return

        try:
            result = await self._create_document.execute(
                user.user_id,
                DocumentCreateInput(
                    text_blob=body.get("text_blob", ""),
                    structured_payload=body.get("structured_payload", {}),
                ),
            )
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        resp.media = document_to_dict(result)
        resp.set_header("ETag", version_etag(result.version))
        resp.status = falcon.HTTP_201


class DocumentResource:
    """GET/PUT/DELETE /v1/documents/{document_id}."""

    def __init__(
        self,
        get_document: GetDocumentUseCase,
        update_document: UpdateDocumentUseCase,
        delete_document: DeleteDocumentUseCase,
        storage_retry: StorageRetry | None = None,
    ) -> None:
        self._get_document = get_document
        self._update_document = update_document
        self._delete_document = delete_document
        self._retry = storage_retry or StorageRetry()

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        """Get document by id."""
        doc_id = parse_document_id(document_id, resp)
        if doc_id is None:
            return

        try:
            result = await self._retry(self._get_document.execute, doc_id)
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Document not found"}
            return

        resp.media = document_to_dict(result)
        resp.set_header("ETag", version_etag(result.version))
        resp.status = falcon.HTTP_200

    async def on_put(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        """Replace content. Needs expected_version in the body or an If-Match header.

        Omitted content fields keep their stored value.
        """
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        doc_id = parse_document_id(document_id, resp)
        if doc_id is None:
            return

        body = await req.get_media(default_when_empty={})
        if not isinstance(body, dict):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Request body must be a JSON object"}
            return

        expected_version = body.get("expected_version")
        if expected_version is None:
            expected_version = _parse_if_match(req.get_header("If-Match"))
        if expected_version is None:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "expected_version is required"}
            return

        try:
            result = await self._update_document.execute(
                user.user_id,
                doc_id,
                DocumentUpdateInput(
                    text_blob=body.get("text_blob"),
                    structured_payload=body.get("structured_payload"),
                    expected_version=expected_version,
                ),
            )
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Document not found"}
            return
        except ConcurrentModification as e:
            write_conflict(resp, e)
            return

        resp.media = document_to_dict(result)
        resp.set_header("ETag", version_etag(result.version))
        resp.status = falcon.HTTP_200

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        """Delete document and its history."""
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        doc_id = parse_document_id(document_id, resp)
        if doc_id is None:
            return

        try:
            await self._delete_document.execute(user.user_id, doc_id)
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Document not found"}
            return

        resp.status = falcon.HTTP_204
