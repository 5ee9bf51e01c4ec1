"""Application entry point and composition root."""

import logging

from falcon.asgi import App

from protoledger import __version__
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
from protoledger.config import get_settings
from protoledger.infrastructure.auth.keycloak_provider import KeycloakProvider
from protoledger.infrastructure.fingerprint import Sha256Fingerprinter, select_digest_backend
from protoledger.infrastructure.persistence.postgres.connection import create_pool
from protoledger.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from protoledger.interfaces.api.app import create_app
from protoledger.interfaces.api.middleware.auth import AuthMiddleware
from protoledger.interfaces.api.middleware.cors import CORSMiddleware
from protoledger.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from protoledger.interfaces.api.resources.documents import DocumentResource, DocumentsResource
from protoledger.interfaces.api.resources.health import HealthResource
from protoledger.interfaces.api.resources.versions import (
    VersionCompareResource,
    VersionResource,
    VersionRestoreResource,
    VersionsResource,
)
from protoledger.interfaces.api.retry import StorageRetry
from protoledger.logging_config import configure_logging

logger = logging.getLogger(__name__)


def main() -> None:
    """CLI entry point."""
    print(f"protoledger v{__version__}")


def create_protoledger_app() -> App:
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings.log_level)

    pool = create_pool(
        settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("Keycloak client secret not set; bearer tokens will be rejected")

    fingerprinter = Sha256Fingerprinter(select_digest_backend(settings.checksum_backend, pool))
    storage_retry = StorageRetry(
        attempts=settings.storage_retry_attempts,
        initial_wait=settings.storage_retry_initial_wait,
        max_wait=settings.storage_retry_max_wait,
    )

    create_document = CreateDocumentUseCase(
        unit_of_work_factory=uow_factory,
        fingerprinter=fingerprinter,
        max_payload_bytes=settings.max_payload_bytes,
    )
    update_document = UpdateDocumentUseCase(
        unit_of_work_factory=uow_factory,
        fingerprinter=fingerprinter,
        max_payload_bytes=settings.max_payload_bytes,
    )
    get_document = GetDocumentUseCase(unit_of_work_factory=uow_factory)
    list_documents = ListDocumentsUseCase(unit_of_work_factory=uow_factory)
    delete_document = DeleteDocumentUseCase(unit_of_work_factory=uow_factory)
    list_versions = ListVersionsUseCase(
        unit_of_work_factory=uow_factory,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
    get_version = GetVersionUseCase(unit_of_work_factory=uow_factory)
    relabel_version = RelabelVersionUseCase(
        unit_of_work_factory=uow_factory,
        max_label_length=settings.max_label_length,
    )
    restore_version = RestoreVersionUseCase(
        unit_of_work_factory=uow_factory,
        update_document=update_document,
    )
    compare_versions = CompareVersionsUseCase(unit_of_work_factory=uow_factory)

    cors_origins = [
        o.strip() for o in settings.cors_origins.split(",") if o.strip()
    ]
    app = create_app(
        documents_resource=DocumentsResource(create_document, list_documents, storage_retry),
        document_resource=DocumentResource(
            get_document, update_document, delete_document, storage_retry
        ),
        versions_resource=VersionsResource(list_versions, storage_retry),
        version_resource=VersionResource(get_version, relabel_version, storage_retry),
        version_restore_resource=VersionRestoreResource(restore_version),
        version_compare_resource=VersionCompareResource(compare_versions, storage_retry),
        health_resource=HealthResource(pool),
        middleware=[
            CORSMiddleware(cors_origins),
            PoolLifespanMiddleware(pool),
            AuthMiddleware(keycloak, allow_anonymous=settings.allow_anonymous),
        ],
    )
    logger.info("protoledger v%s configured (%s)", __version__, settings.environment)
    return app


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    app = create_protoledger_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run_server()
