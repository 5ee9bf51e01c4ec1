"""PostgreSQL version snapshot repository implementation."""

import logging
from uuid import UUID

from psycopg import AsyncConnection
from psycopg.errors import UniqueViolation
from psycopg.types.json import Jsonb

from protoledger.domain.entities import VersionSnapshot, VersionSummary
from protoledger.domain.exceptions import SnapshotConflict

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, document_id, version_number, text_blob, structured_payload, "
    "content_checksum, created_at, created_by, label"
)


def _row_to_snapshot(r: tuple) -> VersionSnapshot:
    return VersionSnapshot(
        id=r[0],
        document_id=r[1],
        version_number=r[2],
        text_blob=r[3],
        structured_payload=r[4],
        content_checksum=r[5],
        created_at=r[6],
        created_by=r[7],
        label=r[8],
    )


class PostgresVersionRepository:
    """Append-only snapshot history."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def create(self, snapshot: VersionSnapshot) -> VersionSnapshot:
        """Insert snapshot; duplicate (document_id, version_number) is a caller bug."""
        try:
            await self._conn.execute(
                f"INSERT INTO version_snapshot ({_COLUMNS}) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)",
                (
                    snapshot.id,
                    snapshot.document_id,
                    snapshot.version_number,
                    snapshot.text_blob,
                    Jsonb(snapshot.structured_payload),
                    snapshot.content_checksum,
                    snapshot.created_at,
                    snapshot.created_by,
                    snapshot.label,
                ),
            )
        except UniqueViolation as e:
            logger.error(
                "Duplicate snapshot for document %s at version %s",
                snapshot.document_id,
                snapshot.version_number,
            )
            raise SnapshotConflict(snapshot.document_id, snapshot.version_number) from e
        return snapshot

    async def list(
        self,
        document_id: UUID,
        *,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[VersionSummary], int]:
        """Page of summaries, newest first, with total count."""
        cur = await self._conn.execute(
            "SELECT count(*) FROM version_snapshot WHERE document_id = %s",
            (document_id,),
        )
        total = (await cur.fetchone())[0]
        cur = await self._conn.execute(
            "SELECT id, version_number, content_checksum, created_at, created_by, label "
            "FROM version_snapshot WHERE document_id = %s "
            "ORDER BY version_number DESC LIMIT %s OFFSET %s",
            (document_id, limit, offset),
        )
        rows = await cur.fetchall()
        items = [
            VersionSummary(
                id=r[0],
                version_number=r[1],
                content_checksum=r[2],
                created_at=r[3],
                created_by=r[4],
                label=r[5],
            )
            for r in rows
        ]
        return items, int(total)

    async def get(self, document_id: UUID, version_number: int) -> VersionSnapshot | None:
        """Get snapshot by document and version number."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM version_snapshot "
            "WHERE document_id = %s AND version_number = %s",
            (document_id, version_number),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return _row_to_snapshot(r)

    async def update_label(
        self, document_id: UUID, version_number: int, label: str | None
    ) -> VersionSnapshot | None:
        """Set or clear a snapshot's label."""
        cur = await self._conn.execute(
            "UPDATE version_snapshot SET label = %s "
            "WHERE document_id = %s AND version_number = %s "
            f"RETURNING {_COLUMNS}",
            (label, document_id, version_number),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return _row_to_snapshot(r)

    async def get_text(
        self, document_id: UUID, version_number: int
    ) -> tuple[int, str | None] | None:
        """Version number and text blob only (no structured payload)."""
        cur = await self._conn.execute(
            "SELECT version_number, text_blob FROM version_snapshot "
            "WHERE document_id = %s AND version_number = %s",
            (document_id, version_number),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return r[0], r[1]
