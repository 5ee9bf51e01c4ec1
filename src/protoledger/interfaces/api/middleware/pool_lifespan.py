"""Pool lifespan middleware - opens the pool on startup, drains it on shutdown."""

import logging
from typing import Any

from psycopg_pool import AsyncConnectionPool, PoolTimeout

logger = logging.getLogger(__name__)


class PoolLifespanMiddleware:
    """Ties the connection pool to the ASGI lifespan.

    Startup waits until ``min_size`` connections are established so the first
    versioned write does not pay the connect cost; a database that cannot be
    reached within ``open_timeout`` aborts startup.
    """

    def __init__(
        self,
        pool: AsyncConnectionPool,
        open_timeout: float = 30.0,
        close_timeout: float = 5.0,
    ) -> None:
        self._pool = pool
        self._open_timeout = open_timeout
        self._close_timeout = close_timeout

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        try:
            await self._pool.open(wait=True, timeout=self._open_timeout)
        except PoolTimeout:
            logger.error(
                "Database not reachable within %.0fs; refusing to start", self._open_timeout
            )
            raise
        logger.info(
            "Connection pool ready (min=%d, max=%d)", self._pool.min_size, self._pool.max_size
        )

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        logger.info("Draining connection pool")
        await self._pool.close(timeout=self._close_timeout)
