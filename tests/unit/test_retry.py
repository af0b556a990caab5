"""Test the transient-failure retry policy."""

import asyncio
from unittest.mock import AsyncMock

import aiohttp
import pytest

from moviehub.config import RetryConfig
from moviehub.infrastructure import RetryPolicy, is_transient
from moviehub.utils import ProviderError


@pytest.fixture
def policy():
    return RetryPolicy(RetryConfig(max_attempts=3, backoff_multiplier=0))


@pytest.mark.parametrize(
    "error,expected",
    [
        (ProviderError("rate limited", "tmdb", 429, transient=True), True),
        (ProviderError("bad key", "tmdb", 401), False),
        (aiohttp.ClientConnectionError(), True),
        (asyncio.TimeoutError(), True),
        (ValueError("boom"), False),
    ],
)
def test_is_transient(error, expected):
    assert is_transient(error) is expected


@pytest.mark.asyncio
async def test_transient_failure_is_retried(policy):
    """Test that a transient error is retried until the call succeeds."""
    func = AsyncMock(side_effect=[ProviderError("busy", "omdb", 503, transient=True), "ok"])

    assert await policy.call(func, "arg") == "ok"
    assert func.await_count == 2


@pytest.mark.asyncio
async def test_permanent_failure_is_raised_at_once(policy):
    """Test that a non-transient error is not retried."""
    func = AsyncMock(side_effect=ProviderError("not found", "tmdb", 404))

    with pytest.raises(ProviderError):
        await policy.call(func)
    assert func.await_count == 1


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts(policy):
    """Test that the last transient error is re-raised when attempts run out."""
    func = AsyncMock(side_effect=aiohttp.ClientConnectionError("refused"))

    with pytest.raises(aiohttp.ClientConnectionError):
        await policy.call(func)
    assert func.await_count == 3
