"""Pytest fixtures for protoledger tests."""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import pytest

from protoledger.domain.canonical_json import canonical_dumps
from protoledger.domain.entities import Document, VersionSnapshot, VersionSummary
from protoledger.domain.exceptions import SnapshotConflict
from protoledger.infrastructure.fingerprint import Sha256Fingerprinter


# --- Shared in-memory storage ---


class InMemoryStore:
    """Tables shared by every unit of work of one test."""

    def __init__(self) -> None:
        self.documents: dict[UUID, Document] = {}
        self.snapshots: dict[tuple[UUID, int], VersionSnapshot] = {}
        self.fail_snapshot_insert: Exception | None = None
        self.commits = 0
        self.rollbacks = 0


# --- Fake repositories ---


class FakeDocumentRepository:
    """In-memory document repository writing through an undo log."""

    def __init__(self, store: InMemoryStore, undo: list[Callable[[], None]]) -> None:
        self._store = store
        self._undo = undo

    async def get_by_id(self, document_id: UUID) -> Document | None:
        doc = self._store.documents.get(document_id)
        # Yield after reading so concurrent tasks can interleave between
        # read-current and the conditional update.
        await asyncio.sleep(0)
        return doc

    async def list(
        self,
        *,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[Document], str | None]:
        items = sorted(self._store.documents.values(), key=lambda d: d.id)
        if cursor:
            cursor_uuid = UUID(cursor)
            items = [d for d in items if d.id > cursor_uuid]
        page = items[: limit + 1]
        next_cursor = str(page[limit - 1].id) if len(page) > limit else None
        return page[:limit], next_cursor

    async def create(self, document: Document) -> Document:
        self._store.documents[document.id] = document
        self._undo.append(lambda: self._store.documents.pop(document.id, None))
        return document

    async def compare_and_swap(
        self,
        document_id: UUID,
        expected_version: int,
        *,
        text_blob: str,
        structured_payload: Any,
        content_checksum: str,
        updated_at: datetime,
    ) -> Document | None:
        current = self._store.documents.get(document_id)
        if current is None or current.version != expected_version:
            return None
        updated = replace(
            current,
            text_blob=text_blob,
            structured_payload=structured_payload,
            content_checksum=content_checksum,
            updated_at=updated_at,
            version=current.version + 1,
        )
        self._store.documents[document_id] = updated
        self._undo.append(lambda: self._store.documents.__setitem__(document_id, current))
        return updated

    async def delete(self, document_id: UUID) -> bool:
        doc = self._store.documents.pop(document_id, None)
        if doc is None:
            return False
        removed = {k: v for k, v in self._store.snapshots.items() if k[0] == document_id}
        for key in removed:
            del self._store.snapshots[key]

        def _restore() -> None:
            self._store.documents[document_id] = doc
            self._store.snapshots.update(removed)

        self._undo.append(_restore)
        return True


class FakeVersionRepository:
    """In-memory snapshot history with the (document_id, version_number) unique key."""

    def __init__(self, store: InMemoryStore, undo: list[Callable[[], None]]) -> None:
        self._store = store
        self._undo = undo

    async def create(self, snapshot: VersionSnapshot) -> VersionSnapshot:
        if self._store.fail_snapshot_insert is not None:
            raise self._store.fail_snapshot_insert
        key = (snapshot.document_id, snapshot.version_number)
        if key in self._store.snapshots:
            raise SnapshotConflict(snapshot.document_id, snapshot.version_number)
        self._store.snapshots[key] = snapshot
        self._undo.append(lambda: self._store.snapshots.pop(key, None))
        return snapshot

    async def list(
        self,
        document_id: UUID,
        *,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[VersionSummary], int]:
        rows = sorted(
            (s for (d, _), s in self._store.snapshots.items() if d == document_id),
            key=lambda s: s.version_number,
            reverse=True,
        )
        items = [
            VersionSummary(
                id=s.id,
                version_number=s.version_number,
                content_checksum=s.content_checksum,
                created_at=s.created_at,
                created_by=s.created_by,
                label=s.label,
            )
            for s in rows[offset : offset + limit]
        ]
        return items, len(rows)

    async def get(self, document_id: UUID, version_number: int) -> VersionSnapshot | None:
        return self._store.snapshots.get((document_id, version_number))

    async def update_label(
        self, document_id: UUID, version_number: int, label: str | None
    ) -> VersionSnapshot | None:
        key = (document_id, version_number)
        current = self._store.snapshots.get(key)
        if current is None:
            return None
        self._store.snapshots[key] = replace(current, label=label)
        self._undo.append(lambda: self._store.snapshots.__setitem__(key, current))
        return self._store.snapshots[key]

    async def get_text(
        self, document_id: UUID, version_number: int
    ) -> tuple[int, str | None] | None:
        s = self._store.snapshots.get((document_id, version_number))
        if s is None:
            return None
        return s.version_number, s.text_blob


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work; rollback replays the undo log in reverse."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self._undo: list[Callable[[], None]] = []
        self.documents = FakeDocumentRepository(store, self._undo)
        self.versions = FakeVersionRepository(store, self._undo)

    async def commit(self) -> None:
        self._undo.clear()
        self._store.commits += 1

    async def rollback(self) -> None:
        while self._undo:
            self._undo.pop()()
        self._store.rollbacks += 1


def make_uow_factory(store: InMemoryStore):
    """Factory with the same commit/rollback contract as the PostgreSQL one."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        uow = FakeUnitOfWork(store)
        try:
            yield uow
            await uow.commit()
        except BaseException:
            await uow.rollback()
            raise

    return _factory


def make_document(
    store: InMemoryStore,
    *,
    text_blob: str = "<p>v1</p>",
    structured_payload: Any = None,
    version: int = 1,
    content_checksum: str | None = None,
) -> Document:
    """Insert a document directly into the store."""
    structured_payload = structured_payload if structured_payload is not None else {}
    if content_checksum is None:
        data = canonical_dumps(text_blob) + canonical_dumps(structured_payload)
        content_checksum = hashlib.sha256(data.encode("utf-8")).hexdigest()
    now = datetime.now(UTC)
    doc = Document(
        id=uuid4(),
        text_blob=text_blob,
        structured_payload=structured_payload,
        version=version,
        content_checksum=content_checksum,
        created_at=now,
        updated_at=now,
        created_by="seed",
    )
    store.documents[doc.id] = doc
    return doc


# --- Fixtures ---


@pytest.fixture
def store() -> InMemoryStore:
    """Fresh in-memory tables for each test."""
    return InMemoryStore()


@pytest.fixture
def uow_factory(store: InMemoryStore):
    """Factory returning async context manager with FakeUnitOfWork."""
    return make_uow_factory(store)


@pytest.fixture
def fingerprinter() -> Sha256Fingerprinter:
    """hashlib-backed fingerprinter."""
    return Sha256Fingerprinter()
