"""Falcon ASGI application."""

import logging

import falcon.asgi
from falcon.asgi import App

from protoledger.domain.exceptions import SnapshotConflict, StorageUnavailable
from protoledger.interfaces.api.resources.documents import DocumentResource, DocumentsResource
from protoledger.interfaces.api.resources.health import HealthResource
from protoledger.interfaces.api.resources.versions import (
    VersionCompareResource,
    VersionResource,
    VersionRestoreResource,
    VersionsResource,
)

logger = logging.getLogger(__name__)


async def _handle_storage_unavailable(req, resp, ex, params) -> None:
    resp.status = falcon.HTTP_503
    resp.media = {"error": "Storage temporarily unavailable"}


async def _handle_snapshot_conflict(req, resp, ex, params) -> None:
    logger.error("Snapshot conflict on %s %s: %s", req.method, req.path, ex)
    resp.status = falcon.HTTP_500
    resp.media = {"error": "Version history is inconsistent"}


async def _handle_unexpected(req, resp, ex, params) -> None:
    logger.exception("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}


def create_app(
    documents_resource: DocumentsResource,
    document_resource: DocumentResource,
    versions_resource: VersionsResource,
    version_resource: VersionResource,
    version_restore_resource: VersionRestoreResource,
    version_compare_resource: VersionCompareResource,
    health_resource: HealthResource,
    middleware: list | None = None,
) -> App:
    """Create Falcon ASGI app with routes and error handlers."""
    app = falcon.asgi.App(middleware=middleware or [])

    app.add_error_handler(Exception, _handle_unexpected)
    app.add_error_handler(StorageUnavailable, _handle_storage_unavailable)
    app.add_error_handler(SnapshotConflict, _handle_snapshot_conflict)

    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/documents", documents_resource)
    app.add_route("/v1/documents/{document_id}", document_resource)
    app.add_route("/v1/documents/{document_id}/versions", versions_resource)
    app.add_route("/v1/documents/{document_id}/versions/{version}", version_resource)
    app.add_route(
        "/v1/documents/{document_id}/versions/{version}/restore",
        version_restore_resource,
    )
    app.add_route(
        "/v1/documents/{document_id}/versions/{version}/compare/{other}",
        version_compare_resource,
    )
    return app
