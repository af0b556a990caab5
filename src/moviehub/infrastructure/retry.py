"""Bounded retry policy for outbound HTTP calls."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

import aiohttp
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..config.models import RetryConfig
from ..utils import ProviderError

T = TypeVar("T")

logger = logging.getLogger(__name__)

TRANSIENT_STATUSES = frozenset({429, 500, 502, 503, 504})


def is_transient(error: BaseException) -> bool:
    """Whether an error is worth retrying: connection errors, timeouts, 429 and 5xx."""
    if isinstance(error, ProviderError):
        return error.transient
    return isinstance(error, (aiohttp.ClientConnectionError, asyncio.TimeoutError))


class RetryPolicy:
    """Fixed-count retry with exponential backoff, only for transient failures."""

    def __init__(self, config: RetryConfig) -> None:
        self._config = config

    @property
    def max_attempts(self) -> int:
        return self._config.max_attempts

    def retrying(self) -> AsyncRetrying:
        """Build a fresh tenacity controller for one call."""
        return AsyncRetrying(
            stop=stop_after_attempt(self._config.max_attempts),
            wait=wait_exponential(
                multiplier=self._config.backoff_multiplier, max=self._config.backoff_max
            ),
            retry=retry_if_exception(is_transient),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Run ``func`` under this policy, re-raising the last error when attempts run out."""
        return await self.retrying()(func, *args, **kwargs)
