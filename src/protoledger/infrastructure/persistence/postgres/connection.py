"""PostgreSQL async connection pool."""

from psycopg_pool import AsyncConnectionPool


def create_pool(
    conninfo: str,
    min_size: int = 2,
    max_size: int = 10,
    timeout: float = 10.0,
) -> AsyncConnectionPool:
    """Create async connection pool.

    Pool is created with open=False; PoolLifespanMiddleware opens it in the
    ASGI lifespan. Connections are health-checked on checkout, and waiting
    longer than ``timeout`` for one raises PoolTimeout, which the unit of
    work reports as StorageUnavailable.
    """
    return AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        timeout=timeout,
        name="protoledger",
        check=AsyncConnectionPool.check_connection,
        open=False,
    )
