"""Settle-all fan-out helpers."""

import asyncio
from typing import Awaitable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class Settled(Generic[T]):
    """Outcome of one task in a settle-all join: either a value or an error."""

    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[BaseException] = None):
        self.value = value
        self.error = error

    @property
    def ok(self) -> bool:
        """Whether the task completed without raising."""
        return self.error is None

    def __repr__(self) -> str:
        if self.ok:
            return f"Settled(value={self.value!r})"
        return f"Settled(error={self.error!r})"


async def _settle(awaitable: Awaitable[T], timeout: Optional[float]) -> Settled[T]:
    try:
        if timeout is not None:
            value = await asyncio.wait_for(awaitable, timeout=timeout)
        else:
            value = await awaitable
        return Settled(value=value)
    except asyncio.TimeoutError:
        return Settled(error=asyncio.TimeoutError(f"timed out after {timeout}s"))
    except Exception as e:
        return Settled(error=e)


async def settle_all(
    awaitables: List[Awaitable[T]], timeout: Optional[float] = None
) -> List[Settled[T]]:
    """Run awaitables concurrently and wait for every one of them to finish.

    Failures and per-task timeouts are captured in the returned ``Settled`` entries and
    never cancel sibling tasks. Results keep the order of ``awaitables``.

    Args:
        awaitables: Coroutines to run.
        timeout: Optional per-task timeout in seconds.

    Returns:
        One ``Settled`` per awaitable, in input order.
    """
    return list(await asyncio.gather(*(_settle(aw, timeout) for aw in awaitables)))
