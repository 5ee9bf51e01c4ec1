"""Version history API resources."""

import falcon.asgi

from protoledger.application.use_cases.version.compare_versions import CompareVersionsUseCase
from protoledger.application.use_cases.version.list_versions import (
    GetVersionUseCase,
    ListVersionsUseCase,
    RelabelVersionUseCase,
)
from protoledger.application.use_cases.version.restore_version import RestoreVersionUseCase
from protoledger.domain.entities import VersionSnapshot, VersionSummary
from protoledger.domain.exceptions import ConcurrentModification, NotFound, ValidationError
from protoledger.domain.value_objects import VersionRef
from protoledger.interfaces.api.resources.documents import (
    document_to_dict,
    parse_document_id,
    version_etag,
    write_conflict,
)
from protoledger.interfaces.api.retry import StorageRetry


def _summary_to_dict(v: VersionSummary) -> dict:
    return {
        "id": str(v.id),
        "version_number": v.version_number,
        "content_checksum": v.content_checksum,
        "label": v.label,
        "created_by": v.created_by,
        "created_at": v.created_at.isoformat(),
    }


def _snapshot_to_dict(v: VersionSnapshot) -> dict:
    return {
        "id": str(v.id),
        "document_id": str(v.document_id),
        "version_number": v.version_number,
        "text_blob": v.text_blob,
        "structured_payload": v.structured_payload,
        "content_checksum": v.content_checksum,
        "label": v.label,
        "created_by": v.created_by,
        "created_at": v.created_at.isoformat(),
    }


def _parse_version(version: str, resp: falcon.asgi.Response) -> int | None:
    try:
        ref = VersionRef.parse(version)
    except ValueError:
        ref = None
    if ref is None or ref.is_current:
        resp.status = falcon.HTTP_400
        resp.media = {"error": "Invalid version number"}
        return None
    return ref.number


def _not_found(resp: falcon.asgi.Response, e: NotFound) -> None:
    resp.status = falcon.HTTP_404
    resp.media = {"error": f"{e.resource} not found"}


class VersionsResource:
    """GET /v1/documents/{document_id}/versions - paginated history."""

    def __init__(
        self,
        list_versions: ListVersionsUseCase,
        storage_retry: StorageRetry | None = None,
    ) -> None:
        self._list_versions = list_versions
        self._retry = storage_retry or StorageRetry()

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        doc_id = parse_document_id(document_id, resp)
        if doc_id is None:
            return

        try:
            page = req.get_param_as_int("page")
            limit = req.get_param_as_int("limit")
        except falcon.HTTPBadRequest:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "page and limit must be integers"}
            return

        try:
            result = await self._retry(
                self._list_versions.execute, doc_id, page=page, limit=limit
            )
        except NotFound as e:
            _not_found(resp, e)
            return

        resp.media = {
            "items": [_summary_to_dict(v) for v in result.items],
            "total": result.total,
            "page": result.page,
            "limit": result.limit,
        }
        resp.status = falcon.HTTP_200


class VersionResource:
    """GET/PATCH /v1/documents/{document_id}/versions/{version}."""

    def __init__(
        self,
        get_version: GetVersionUseCase,
        relabel_version: RelabelVersionUseCase,
        storage_retry: StorageRetry | None = None,
    ) -> None:
        self._get_version = get_version
        self._relabel_version = relabel_version
        self._retry = storage_retry or StorageRetry()

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
        version: str,
    ) -> None:
        doc_id = parse_document_id(document_id, resp)
        if doc_id is None:
            return
        number = _parse_version(version, resp)
        if number is None:
            return

        try:
            snapshot = await self._retry(self._get_version.execute, doc_id, number)
        except NotFound as e:
            _not_found(resp, e)
            return

        resp.media = _snapshot_to_dict(snapshot)
        resp.status = falcon.HTTP_200

    async def on_patch(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
        version: str,
    ) -> None:
        """Set or clear the label. Body: {"label": str | null}."""
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        doc_id = parse_document_id(document_id, resp)
        if doc_id is None:
            return
        number = _parse_version(version, resp)
        if number is None:
            return

        body = await req.get_media(default_when_empty={})
        if not isinstance(body, dict) or "label" not in body:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "label is required"}
            return

        try:
            snapshot = await self._relabel_version.execute(doc_id, number, body["label"])
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        except NotFound as e:
            _not_found(resp, e)
            return

        resp.media = _snapshot_to_dict(snapshot)
        resp.status = falcon.HTTP_200


class VersionRestoreResource:
    """POST /v1/documents/{document_id}/versions/{version}/restore."""

    def __init__(self, restore_version: RestoreVersionUseCase) -> None:
        self._restore_version = restore_version

    async def on_post(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
        version: str,
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        doc_id = parse_document_id(document_id, resp)
        if doc_id is None:
            return
        number = _parse_version(version, resp)
        if number is None:
            return

        body = await req.get_media(default_when_empty={})
        expected_version = body.get("expected_version") if isinstance(body, dict) else None

        try:
            result = await self._restore_version.execute(
                user.user_id, doc_id, number, expected_version=expected_version
            )
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        except NotFound as e:
            _not_found(resp, e)
            return
        except ConcurrentModification as e:
            write_conflict(resp, e)
            return

        resp.media = document_to_dict(result)
        resp.set_header("ETag", version_etag(result.version))
        resp.status = falcon.HTTP_200


class VersionCompareResource:
    """GET /v1/documents/{document_id}/versions/{version}/compare/{other}.

    ``other`` may be ``current`` to compare against the live document.
    """

    def __init__(
        self,
        compare_versions: CompareVersionsUseCase,
        storage_retry: StorageRetry | None = None,
    ) -> None:
        self._compare_versions = compare_versions
        self._retry = storage_retry or StorageRetry()

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
        version: str,
        other: str,
    ) -> None:
        doc_id = parse_document_id(document_id, resp)
        if doc_id is None:
            return
        number = _parse_version(version, resp)
        if number is None:
            return
        try:
            ref = VersionRef.parse(other)
        except ValueError:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Invalid version reference"}
            return

        try:
            result = await self._retry(self._compare_versions.execute, doc_id, number, ref)
        except NotFound as e:
            _not_found(resp, e)
            return

        resp.media = {
            "a": {"version_number": result.a.version_number, "text_blob": result.a.text_blob},
            "b": {"version_number": result.b.version_number, "text_blob": result.b.text_blob},
        }
        resp.status = falcon.HTTP_200
