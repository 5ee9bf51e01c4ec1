"""SHA-256 digest backend computed by the PostgreSQL server."""

from psycopg_pool import AsyncConnectionPool


class PostgresDigestBackend:
    """Computes SHA-256 with PostgreSQL's built-in ``sha256(bytea)``.

    Used where the interpreter's hashlib does not offer sha256
    (e.g. restricted OpenSSL builds).
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def sha256_hex(self, data: bytes) -> str:
        async with self._pool.connection() as conn:
            cur = await conn.execute("SELECT encode(sha256(%s), 'hex')", (data,))
            r = await cur.fetchone()
        return r[0]
