"""Cache interface."""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional


class ICache(ABC):
    """Key-value cache with TTLs and glob deletion.

    An unavailable backing store behaves as an always-missing cache; no method raises
    because of backend errors.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get a cached value or None."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store a JSON-serializable value.

        Args:
            key: Cache key.
            value: Value to store.
            ttl: Time to live in seconds, None for the backend default.

        Returns:
            True if the value was stored.
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if something was removed."""
        pass

    @abstractmethod
    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern.

        Returns:
            Number of deleted keys.
        """
        pass

    @abstractmethod
    async def is_available(self) -> bool:
        """Check whether the backing store answers."""
        pass

    async def get_or_set(
        self, key: str, ttl: Optional[int], fetcher: Callable[[], Awaitable[Any]]
    ) -> Any:
        """Return the cached value or compute, store and return it.

        Args:
            key: Cache key.
            ttl: Time to live in seconds.
            fetcher: Coroutine function producing the value on a miss.

        Returns:
            Cached or freshly computed value.
        """
        cached = await self.get(key)
        if cached is not None:
            return cached
        value = await fetcher()
        if value is not None:
            await self.set(key, value, ttl)
        return value

    async def close(self) -> None:
        """Release backend connections."""
        return None
