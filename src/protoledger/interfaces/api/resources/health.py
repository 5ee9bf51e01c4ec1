"""Health check endpoints."""

import asyncio
import logging

import falcon.asgi

logger = logging.getLogger(__name__)


class HealthResource:
    """Health and readiness endpoints."""

    def __init__(self, pool=None, timeout: float = 5.0) -> None:
        self._pool = pool
        self._timeout = timeout

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - readiness (database round-trip)."""
        if self._pool is None:
            resp.media = {"status": "ready"}
            resp.status = falcon.HTTP_200
            return
        loop = asyncio.get_running_loop()
        start = loop.time()
        try:
            await asyncio.wait_for(self._ping(), timeout=self._timeout)
        except Exception as e:
            logger.warning("Readiness check failed: %s", e)
            resp.media = {"status": "unavailable", "error": str(e) or type(e).__name__}
            resp.status = falcon.HTTP_503
            return
        resp.media = {
            "status": "ready",
            "latency_ms": round((loop.time() - start) * 1000, 1),
        }
        resp.status = falcon.HTTP_200

    async def _ping(self) -> None:
        async with self._pool.connection() as conn:
            await conn.execute("SELECT 1")
