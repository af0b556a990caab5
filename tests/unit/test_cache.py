"""Test cache backends and the cache manager."""

from unittest.mock import AsyncMock, Mock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from moviehub.config.models import CacheConfig
from moviehub.infrastructure import CacheManager, MemoryCache, RedisCache, create_cache


@pytest.mark.asyncio
async def test_memory_cache_round_trip_and_expiry():
    """Test that entries are readable until they expire."""
    backend = MemoryCache()
    await backend.set("k", {"a": 1}, ttl=60)

    assert await backend.get("k") == {"a": 1}

    _, payload = backend._store["k"]
    backend._store["k"] = (0.0, payload)

    assert await backend.get("k") is None
    assert len(backend) == 0


@pytest.mark.asyncio
async def test_memory_cache_set_drops_expired_entries():
    """Test that writes evict every expired entry, not only the key written."""
    backend = MemoryCache()
    for i in range(100):
        await backend.set(f"old:{i}", i, ttl=60)
    for key, (_, payload) in list(backend._store.items()):
        backend._store[key] = (0.0, payload)

    await backend.set("fresh", "value", ttl=60)

    assert len(backend) == 1
    assert await backend.get("fresh") == "value"


@pytest.mark.asyncio
async def test_memory_cache_returns_copies():
    """Test that mutating a read value does not change the cache."""
    backend = MemoryCache()
    await backend.set("k", {"items": [1]})

    value = await backend.get("k")
    value["items"].append(2)

    assert await backend.get("k") == {"items": [1]}


@pytest.mark.asyncio
async def test_memory_cache_delete_pattern():
    """Test glob-style deletion."""
    backend = MemoryCache()
    for key in ("p:search:a", "p:search:b", "p:movie:1"):
        await backend.set(key, 1)

    assert await backend.delete_pattern("p:search:*") == 2
    assert await backend.get("p:movie:1") == 1


@pytest.mark.asyncio
async def test_get_or_set_computes_once():
    """Test that the factory only runs on a miss."""
    backend = MemoryCache()
    factory = AsyncMock(return_value=[1, 2])

    first = await backend.get_or_set("k", 60, factory)
    second = await backend.get_or_set("k", 60, factory)

    assert first == second == [1, 2]
    factory.assert_awaited_once()


@pytest.mark.asyncio
async def test_manager_prefixes_keys():
    """Test that the manager namespaces every key."""
    backend = MemoryCache()
    manager = CacheManager(backend, CacheConfig(key_prefix="mh"))

    await manager.set(CacheManager.movie_key("tmdb-603"), {"title": "The Matrix"})

    assert await backend.get("mh:movie:tmdb-603") == {"title": "The Matrix"}
    assert await manager.get("movie:tmdb-603") == {"title": "The Matrix"}


@pytest.mark.asyncio
async def test_disabled_manager_never_hits():
    """Test that a disabled cache drops writes and misses reads."""
    backend = MemoryCache()
    manager = CacheManager(backend, CacheConfig(enabled=False))

    assert await manager.set("k", 1) is False
    assert await manager.get("k") is None
    assert await manager.is_available() is False
    assert len(backend) == 0


@pytest.mark.asyncio
async def test_invalidate_search_by_query():
    """Test invalidating one query's searches while keeping others."""
    manager = CacheManager(MemoryCache(), CacheConfig(key_prefix="mh"))
    await manager.set(CacheManager.search_key("Dune", None, "relevance"), [])
    await manager.set(CacheManager.search_key("Dune", 2021, "year_desc", page=2), [])
    await manager.set(CacheManager.search_key("Heat", None, "relevance"), [])
    await manager.set(CacheManager.movie_key("tmdb-1"), {})

    assert await manager.invalidate_search("  DUNE ") == 2
    assert await manager.get(CacheManager.search_key("Heat", None, "relevance")) == []
    assert await manager.clear_all() == 2


def test_key_builders():
    """Test the cache key formats."""
    assert CacheManager.search_key(" Dune ", None, "relevance") == "search:dune:any:relevance"
    assert CacheManager.search_key("Dune", 2021, "year_desc", 3) == "search:dune:2021:year_desc:p3"
    assert CacheManager.summary_key("full", "Dune") == "llm:full:dune"


def test_create_cache_picks_backend():
    """Test backend selection from configuration."""
    assert isinstance(create_cache(CacheConfig())._backend, MemoryCache)
    assert isinstance(create_cache(CacheConfig(backend="redis"))._backend, RedisCache)


@pytest.fixture
def redis_client():
    client = Mock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    return client


@pytest.mark.asyncio
async def test_redis_cache_serializes_json(redis_client):
    """Test that values are stored as JSON with a TTL."""
    cache = RedisCache("redis://unused", default_ttl=30, client=redis_client)
    redis_client.get.return_value = '{"a": 1}'

    assert await cache.set("k", {"a": 1}) is True
    assert await cache.get("k") == {"a": 1}
    redis_client.set.assert_awaited_once_with("k", '{"a": 1}', ex=30)


@pytest.mark.asyncio
async def test_redis_errors_degrade_to_misses(redis_client):
    """Test that backend failures never raise to callers."""
    redis_client.get.side_effect = RedisError("down")
    redis_client.set.side_effect = RedisError("down")
    redis_client.delete.side_effect = RedisError("down")
    redis_client.ping.side_effect = RedisConnectionError("down")
    cache = RedisCache("redis://unused", client=redis_client)

    assert await cache.get("k") is None
    assert await cache.set("k", 1) is False
    assert await cache.delete("k") is False
    assert await cache.is_available() is False


@pytest.mark.asyncio
async def test_redis_undecodable_entry_is_a_miss(redis_client):
    """Test that garbage in Redis reads as a miss."""
    redis_client.get.return_value = "not json"
    cache = RedisCache("redis://unused", client=redis_client)

    assert await cache.get("k") is None


@pytest.mark.asyncio
async def test_redis_delete_pattern_scans(redis_client):
    """Test pattern deletion through SCAN."""

    async def scan_iter(match, count):
        for key in ("mh:search:a", "mh:search:b"):
            yield key

    redis_client.scan_iter = scan_iter
    cache = RedisCache("redis://unused", client=redis_client)

    assert await cache.delete_pattern("mh:search:*") == 2
    assert redis_client.delete.await_count == 2


@pytest.mark.asyncio
async def test_redis_close(redis_client):
    """Test that closing releases the client."""
    cache = RedisCache("redis://unused", client=redis_client)

    await cache.close()

    redis_client.aclose.assert_awaited_once()
