"""PostgreSQL document repository implementation."""

from datetime import datetime
from typing import Any
from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from protoledger.domain.entities import Document

_COLUMNS = (
    "id, text_blob, structured_payload, version, content_checksum, "
    "created_at, updated_at, created_by"
)


def _row_to_document(r: tuple) -> Document:
    return Document(
        id=r[0],
        text_blob=r[1],
        structured_payload=r[2],
        version=r[3],
        content_checksum=r[4],
        created_at=r[5],
        updated_at=r[6],
        created_by=r[7],
    )


class PostgresDocumentRepository:
    """Document repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, document_id: UUID) -> Document | None:
        """Get document by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM document WHERE id = %s",
            (document_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return _row_to_document(r)

    async def list(
        self,
        *,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[Document], str | None]:
        """List documents with cursor pagination."""
        conditions = []
        _params: list[object] = []
        if cursor:
            conditions.append("id > %s")
            _params.append(UUID(cursor))
        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        params = tuple(_params) + (limit + 1,)
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM document{where} ORDER BY id LIMIT %s",
            params,
        )
        rows = await cur.fetchall()
        docs = [_row_to_document(r) for r in rows[:limit]]
        next_cursor = str(rows[limit - 1][0]) if len(rows) > limit else None
        return docs, next_cursor

    async def create(self, document: Document) -> Document:
        """Create document."""
        await self._conn.execute(
            "INSERT INTO document (id, text_blob, structured_payload, version, "
            "content_checksum, created_at, updated_at, created_by) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s)",
            (
                document.id,
                document.text_blob,
                Jsonb(document.structured_payload),
                document.version,
                document.content_checksum,
                document.created_at,
                document.updated_at,
                document.created_by,
            ),
        )
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
        """Conditional update: applies only while version = expected_version."""
        cur = await self._conn.execute(
            "UPDATE document SET text_blob = %s, structured_payload = %s, "
            "content_checksum = %s, updated_at = %s, version = version + 1 "
            f"WHERE id = %s AND version = %s RETURNING {_COLUMNS}",
            (
                text_blob,
                Jsonb(structured_payload),
                content_checksum,
                updated_at,
                document_id,
                expected_version,
            ),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return _row_to_document(r)

    async def delete(self, document_id: UUID) -> bool:
        """Hard delete document; snapshots go with it (ON DELETE CASCADE)."""
        cur = await self._conn.execute(
            "DELETE FROM document WHERE id = %s",
            (document_id,),
        )
        return cur.rowcount > 0
