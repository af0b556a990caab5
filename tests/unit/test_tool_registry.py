"""Test tool servers, the tool registry and the in-process gateway."""

from unittest.mock import AsyncMock, Mock

import pytest

from moviehub.core.services import (
    InMemoryWatchlistStore,
    LocalToolGateway,
    TMDbToolServer,
    ToolRegistry,
    UserToolServer,
)
from moviehub.utils import ToolCallError, ToolNotFoundError


@pytest.fixture
def tmdb_provider():
    provider = Mock()
    provider.search_raw = AsyncMock(return_value={"results": [{"id": 603, "title": "The Matrix"}]})
    provider.details_raw = AsyncMock(return_value={"id": 603, "title": "The Matrix"})
    provider.find_raw = AsyncMock(return_value={"movie_results": []})
    provider.native_id = Mock(side_effect=lambda movie_id: movie_id.replace("tmdb-", ""))
    return provider


@pytest.fixture
def store():
    return InMemoryWatchlistStore()


@pytest.fixture
def registry(tmdb_provider, store):
    registry = ToolRegistry()
    registry.register(TMDbToolServer(tmdb_provider))
    registry.register(UserToolServer(store))
    return registry


@pytest.fixture
def gateway(registry):
    return LocalToolGateway(registry)


def test_lookup_resolves_qualified_name(registry):
    """Test that a server.tool name resolves to its server and spec."""
    server, spec = registry.lookup("tmdb.search_movies")

    assert server.name == "tmdb"
    assert spec.name == "search_movies"
    assert spec.required == ["query"]


@pytest.mark.parametrize(
    "name", ["search_movies", "tmdb.", ".search_movies", "a.b.c", "imdb.search_movies"]
)
def test_lookup_rejects_malformed_or_unknown_server(registry, name):
    """Test that malformed names and unknown servers raise ToolNotFoundError."""
    with pytest.raises(ToolNotFoundError):
        registry.lookup(name)


def test_lookup_rejects_unknown_tool(registry):
    """Test that an unknown tool on a known server raises ToolNotFoundError."""
    with pytest.raises(ToolNotFoundError, match="tmdb.play_movie"):
        registry.lookup("tmdb.play_movie")


def test_list_exposes_qualified_names(registry):
    """Test that the tool listing carries qualified names and schemas."""
    tools = {tool["name"]: tool for tool in registry.list()}

    assert "tmdb.discover_movies" in tools
    assert "user.get_watchlist" in tools
    assert tools["user.get_watchlist"]["server"] == "user"
    assert tools["tmdb.discover_movies"]["inputSchema"]["required"] == ["genreId"]


@pytest.mark.asyncio
async def test_gateway_dispatches_to_server(gateway, tmdb_provider):
    """Test an in-process tool call returning the provider payload."""
    result = await gateway.call_tool("tmdb.search_movies", {"query": "Matrix"})

    assert result["results"][0]["title"] == "The Matrix"
    tmdb_provider.search_raw.assert_awaited_once_with("Matrix", None, 1)


@pytest.mark.asyncio
async def test_gateway_strips_id_prefix(gateway, tmdb_provider):
    """Test that prefixed movie ids reach the provider as native ids."""
    await gateway.call_tool("tmdb.get_movie_details", {"movieId": "tmdb-603"})

    tmdb_provider.details_raw.assert_awaited_once_with("603")


@pytest.mark.asyncio
async def test_gateway_reports_missing_required_args(gateway, tmdb_provider):
    """Test that missing required arguments fail before reaching the provider."""
    with pytest.raises(ToolCallError, match="query"):
        await gateway.call_tool("tmdb.search_movies", {"query": ""})

    tmdb_provider.search_raw.assert_not_awaited()


@pytest.mark.asyncio
async def test_gateway_wraps_handler_failures(gateway, tmdb_provider):
    """Test that provider errors surface as ToolCallError."""
    tmdb_provider.search_raw.side_effect = RuntimeError("boom")

    with pytest.raises(ToolCallError, match="boom"):
        await gateway.call_tool("tmdb.search_movies", {"query": "Matrix"})


@pytest.mark.asyncio
async def test_external_id_without_match_fails(gateway):
    """Test that an unknown IMDb id is a failed tool call."""
    with pytest.raises(ToolCallError):
        await gateway.call_tool("tmdb.get_movie_by_external_id", {"externalId": "tt0000000"})


@pytest.mark.asyncio
async def test_gateway_unknown_tool(gateway):
    """Test that the gateway propagates ToolNotFoundError unchanged."""
    with pytest.raises(ToolNotFoundError):
        await gateway.call_tool("tmdb.unknown", {})


@pytest.mark.asyncio
async def test_user_watchlist_tool(gateway, store):
    """Test the watchlist tool against the store."""
    store.add("alice", "tmdb-603", status="watched", rating=9)
    store.add("alice", "tmdb-604")
    store.add("bob", "tmdb-605")

    result = await gateway.call_tool("user.get_watchlist", {"userId": "alice"})
    watched = await gateway.call_tool(
        "user.get_watchlist", {"userId": "alice", "status": "watched"}
    )

    assert result["userId"] == "alice"
    assert {item["movieId"] for item in result["movies"]} == {"tmdb-603", "tmdb-604"}
    assert [item["movieId"] for item in watched["movies"]] == ["tmdb-603"]


@pytest.mark.asyncio
async def test_list_tools_matches_registry(gateway, registry):
    """Test that the gateway lists the registry's tools."""
    assert await gateway.list_tools() == registry.list()
