"""Fixtures for API tests."""

import pytest

from protoledger.application.use_cases.document.create_document import CreateDocumentUseCase
from protoledger.application.use_cases.document.delete_document import DeleteDocumentUseCase
from protoledger.application.use_cases.document.get_document import (
    GetDocumentUseCase,
    ListDocumentsUseCase,
)
from protoledger.application.use_cases.document.update_document import UpdateDocumentUseCase
from protoledger.application.use_cases.version.compare_versions import CompareVersionsUseCase
from protoledger.application.use_cases.version.list_versions import (
    GetVersionUseCase,
    ListVersionsUseCase,
    RelabelVersionUseCase,
)
from protoledger.application.use_cases.version.restore_version import RestoreVersionUseCase
from protoledger.interfaces.api.app import create_app
from protoledger.interfaces.api.resources.documents import DocumentResource, DocumentsResource
from protoledger.interfaces.api.resources.health import HealthResource
from protoledger.interfaces.api.resources.versions import (
    VersionCompareResource,
    VersionResource,
    VersionRestoreResource,
    VersionsResource,
)
from protoledger.interfaces.api.retry import StorageRetry


class _TestUser:
    user_id = "test-user-1"


class AuthBypassMiddleware:
    """Middleware that sets context.user for testing."""

    async def process_request(self, req, resp):
        req.context.user = _TestUser()


def build_app(uow_factory, fingerprinter, middleware=None):
    """Falcon ASGI app wired to the in-memory unit of work."""
    retry = StorageRetry(attempts=2, initial_wait=0.001, max_wait=0.002)
    update_document = UpdateDocumentUseCase(uow_factory, fingerprinter)
    return create_app(
        documents_resource=DocumentsResource(
            CreateDocumentUseCase(uow_factory, fingerprinter),
            ListDocumentsUseCase(uow_factory),
            retry,
        ),
        document_resource=DocumentResource(
            GetDocumentUseCase(uow_factory),
            update_document,
            DeleteDocumentUseCase(uow_factory),
            retry,
        ),
        versions_resource=VersionsResource(ListVersionsUseCase(uow_factory), retry),
        version_resource=VersionResource(
            GetVersionUseCase(uow_factory), RelabelVersionUseCase(uow_factory), retry
        ),
        version_restore_resource=VersionRestoreResource(
            RestoreVersionUseCase(uow_factory, update_document)
        ),
        version_compare_resource=VersionCompareResource(
            CompareVersionsUseCase(uow_factory), retry
        ),
        health_resource=HealthResource(),
        middleware=middleware if middleware is not None else [AuthBypassMiddleware()],
    )


@pytest.fixture
def app(uow_factory, fingerprinter):
    """Falcon ASGI app with API resources for testing."""
    return build_app(uow_factory, fingerprinter)


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    from falcon.testing import TestClient
    return TestClient(app)
