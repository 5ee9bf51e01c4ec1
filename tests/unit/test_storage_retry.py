"""Unit tests for StorageRetry backoff."""

from unittest.mock import AsyncMock

import pytest

from protoledger.domain.exceptions import NotFound, StorageUnavailable
from protoledger.interfaces.api.retry import StorageRetry


@pytest.fixture
def retry() -> StorageRetry:
    """Fast retry: near-zero waits."""
    return StorageRetry(attempts=3, initial_wait=0.001, max_wait=0.002)


@pytest.mark.asyncio
async def test_returns_result_without_retry(retry: StorageRetry) -> None:
    fn = AsyncMock(return_value="ok")
    assert await retry(fn, 1, key="v") == "ok"
    fn.assert_awaited_once_with(1, key="v")


@pytest.mark.asyncio
async def test_retries_storage_unavailable_then_succeeds(retry: StorageRetry) -> None:
    fn = AsyncMock(side_effect=[StorageUnavailable("down"), StorageUnavailable("down"), "ok"])
    assert await retry(fn) == "ok"
    assert fn.await_count == 3


@pytest.mark.asyncio
async def test_gives_up_after_attempts(retry: StorageRetry) -> None:
    fn = AsyncMock(side_effect=StorageUnavailable("down"))
    with pytest.raises(StorageUnavailable):
        await retry(fn)
    assert fn.await_count == 3


@pytest.mark.asyncio
async def test_other_errors_not_retried(retry: StorageRetry) -> None:
    fn = AsyncMock(side_effect=NotFound("Document", "x"))
    with pytest.raises(NotFound):
        await retry(fn)
    assert fn.await_count == 1
