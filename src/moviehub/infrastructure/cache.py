"""Cache backends and the domain-aware cache manager."""

import fnmatch
import json
import time
from typing import Any, Dict, Optional, Tuple

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from ..config.models import CacheConfig
from ..core.interfaces import ICache
from .logging import LoggerMixin


class MemoryCache(ICache, LoggerMixin):
    """Process-local TTL cache."""

    def __init__(self, default_ttl: int = 3600) -> None:
        self._default_ttl = default_ttl
        self._store: Dict[str, Tuple[float, str]] = {}

    async def get(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            return None
        expires_at, payload = entry
        if expires_at <= time.monotonic():
            self._store.pop(key, None)
            return None
        return json.loads(payload)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        try:
            payload = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            self.logger.warning(f"Cannot cache value for '{key}': {e}")
            return False
        now = time.monotonic()
        self._purge_expired(now)
        self._store[key] = (now + (ttl or self._default_ttl), payload)
        return True

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._store.items() if expires_at <= now]
        for key in expired:
            del self._store[key]

    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        matched = [key for key in self._store if fnmatch.fnmatchcase(key, pattern)]
        for key in matched:
            del self._store[key]
        return len(matched)

    async def is_available(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._store)


class RedisCache(ICache, LoggerMixin):
    """Redis-backed cache. Backend errors degrade to misses and no-ops."""

    def __init__(self, url: str, default_ttl: int = 3600, client: Optional[Any] = None) -> None:
        """Initialize Redis cache.

        Args:
            url: Redis connection URL.
            default_ttl: TTL used when ``set`` gets none.
            client: Pre-built ``redis.asyncio`` client, mainly for tests.
        """
        self._url = url
        self._default_ttl = default_ttl
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = aioredis.from_url(self._url, decode_responses=True)
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        try:
            payload = await self._get_client().get(key)
        except RedisError as e:
            self.logger.warning(f"Redis GET failed for '{key}': {e}")
            return None
        if payload is None:
            return None
        try:
            return json.loads(payload)
        except ValueError:
            self.logger.warning(f"Discarding undecodable cache entry '{key}'")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        try:
            payload = json.dumps(value, default=str)
            await self._get_client().set(key, payload, ex=ttl or self._default_ttl)
            return True
        except (TypeError, ValueError) as e:
            self.logger.warning(f"Cannot cache value for '{key}': {e}")
        except RedisError as e:
            self.logger.warning(f"Redis SET failed for '{key}': {e}")
        return False

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self._get_client().delete(key))
        except RedisError as e:
            self.logger.warning(f"Redis DEL failed for '{key}': {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        client = self._get_client()
        deleted = 0
        try:
            async for key in client.scan_iter(match=pattern, count=500):
                deleted += await client.delete(key)
        except RedisError as e:
            self.logger.warning(f"Redis pattern delete failed for '{pattern}': {e}")
        return deleted

    async def is_available(self) -> bool:
        try:
            return bool(await self._get_client().ping())
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class CacheManager(ICache, LoggerMixin):
    """Namespaced cache facade with key builders for the cached domain objects.

    Every key passed in is stored as ``<prefix>:<key>``. When caching is disabled all
    reads miss and all writes are dropped.
    """

    def __init__(self, backend: ICache, config: Optional[CacheConfig] = None) -> None:
        self._backend = backend
        self._config = config or CacheConfig()

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def _key(self, key: str) -> str:
        return f"{self._config.key_prefix}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        if not self.enabled:
            return None
        value = await self._backend.get(self._key(key))
        self.logger.debug(f"Cache {'hit' if value is not None else 'miss'}: {key}")
        return value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        if not self.enabled:
            return False
        return await self._backend.set(self._key(key), value, ttl or self._config.default_ttl)

    async def delete(self, key: str) -> bool:
        return await self._backend.delete(self._key(key))

    async def delete_pattern(self, pattern: str) -> int:
        return await self._backend.delete_pattern(self._key(pattern))

    async def is_available(self) -> bool:
        return self.enabled and await self._backend.is_available()

    async def close(self) -> None:
        await self._backend.close()

    @staticmethod
    def search_key(query: str, year: Optional[int], sort: str, page: int = 1) -> str:
        """Key of an aggregated search result."""
        key = f"search:{query.strip().lower()}:{year if year is not None else 'any'}:{sort}"
        return key if page == 1 else f"{key}:p{page}"

    @staticmethod
    def movie_key(movie_id: str) -> str:
        """Key of a merged movie detail record."""
        return f"movie:{movie_id}"

    @staticmethod
    def summary_key(kind: str, title: str) -> str:
        """Key of an LLM summary artefact, e.g. ``llm:full:dune``."""
        return f"llm:{kind}:{title.strip().lower()}"

    async def invalidate_search(self, query: Optional[str] = None) -> int:
        """Drop cached searches, all of them or those of one query."""
        pattern = f"search:{query.strip().lower()}:*" if query else "search:*"
        deleted = await self.delete_pattern(pattern)
        self.logger.info(f"Invalidated {deleted} cached searches")
        return deleted

    async def clear_all(self) -> int:
        """Drop every key under this manager's prefix."""
        deleted = await self.delete_pattern("*")
        self.logger.info(f"Cleared {deleted} cache entries")
        return deleted


def create_cache(config: CacheConfig) -> CacheManager:
    """Build the cache manager for the configured backend.

    Args:
        config: Cache configuration.

    Returns:
        Cache manager wrapping a Redis or in-memory backend.
    """
    backend: ICache
    if config.backend == "redis":
        backend = RedisCache(config.url, default_ttl=config.default_ttl)
    else:
        backend = MemoryCache(default_ttl=config.default_ttl)
    return CacheManager(backend, config)
