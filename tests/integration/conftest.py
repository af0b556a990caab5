"""Integration test fixtures: an application wired with fake providers."""

import pytest
from fastapi.testclient import TestClient

from moviehub.api import create_app
from moviehub.core.interfaces import (
    ISearchAggregator,
    ISummaryService,
    IToolGateway,
    IWatchlistStore,
    IWorkflowOrchestrator,
)
from moviehub.core.services import (
    InMemoryWatchlistStore,
    MovieAggregator,
    MovieSummaryService,
    ProviderRegistry,
    SearchAggregator,
    ToolRegistry,
    UserToolServer,
    WorkflowOrchestrator,
)
from moviehub.infrastructure import CacheManager


@pytest.fixture
def movies(make_movie):
    """Canned catalog shared by the fake providers."""
    return {
        "tmdb": [
            make_movie(
                "The Matrix",
                1999,
                movie_id="tmdb-603",
                ratings=[("tmdb", 8.2, 10, 25000)],
                external_ids={"tmdb": "603", "imdb": "tt0133093"},
            ),
            make_movie("The Matrix Reloaded", 2003, movie_id="tmdb-604"),
        ],
        "omdb": [
            make_movie(
                "The Matrix",
                1999,
                source="omdb",
                movie_id="omdb-tt0133093",
                plot="A hacker learns the truth.",
                ratings=[("imdb", 8.7, 10, 2000000)],
                external_ids={"imdb": "tt0133093"},
            )
        ],
    }


@pytest.fixture
def gateway(fake_gateway):
    return fake_gateway(
        {
            "tmdb.search_movies": {
                "results": [{"id": 603, "title": "The Matrix", "release_date": "1999-03-30"}]
            },
            "omdb.search_movies": {"Response": "False"},
            "tvmaze.search_shows": [],
            "tmdb.get_popular_movies": RuntimeError("tmdb down"),
        }
    )


@pytest.fixture
def app_container(container, config, cache, movies, fake_provider, gateway):
    """Container with every service the API resolves, backed by fakes."""
    tmdb = fake_provider("tmdb", movies["tmdb"], details={m.id: m for m in movies["tmdb"]})
    omdb = fake_provider(
        "omdb", movies["omdb"], details={m.id: m for m in movies["omdb"]}, external_id_key="imdb"
    )
    providers = ProviderRegistry([tmdb, omdb])
    aggregator = MovieAggregator()
    store = InMemoryWatchlistStore()
    tools = ToolRegistry()
    tools.register(UserToolServer(store))

    container.register_instance(CacheManager, cache)
    container.register_instance(MovieAggregator, aggregator)
    container.register_instance(IWatchlistStore, store)
    container.register_instance(ProviderRegistry, providers)
    container.register_instance(ToolRegistry, tools)
    container.register_instance(IToolGateway, gateway)
    container.register_instance(
        ISearchAggregator, SearchAggregator(config, providers, cache, aggregator)
    )
    container.register_instance(
        IWorkflowOrchestrator, WorkflowOrchestrator(config, gateway, aggregator)
    )
    container.register_instance(ISummaryService, MovieSummaryService(None, cache))
    return container


@pytest.fixture
def client(app_container):
    with TestClient(create_app(app_container)) as test_client:
        yield test_client
