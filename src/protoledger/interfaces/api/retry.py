"""Backoff retry for transient storage failures in read-only handlers."""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from protoledger.domain.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StorageRetry:
    """Retries StorageUnavailable with exponential backoff and jitter.

    Only wrap idempotent reads; mutations are never retried here.
    """

    def __init__(
        self,
        attempts: int = 3,
        initial_wait: float = 0.1,
        max_wait: float = 2.0,
    ) -> None:
        self._attempts = attempts
        self._initial_wait = initial_wait
        self._max_wait = max_wait

    async def __call__(self, fn: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(StorageUnavailable),
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential(multiplier=self._initial_wait, max=self._max_wait)
            + wait_random(0, self._initial_wait / 4),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                result = await fn(*args, **kwargs)
        return result
