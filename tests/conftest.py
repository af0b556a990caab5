"""Pytest configuration and fixtures."""

import asyncio
from typing import Any, Callable, Dict, List, Optional

import pytest

from moviehub.config import ConfigManager
from moviehub.core.interfaces import IMovieProvider, IToolGateway
from moviehub.core.models import ExternalIds, Movie, ProviderResponse, Rating
from moviehub.infrastructure import CacheManager, Container, MemoryCache


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: tests that drive the assembled app")


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary configuration file."""
    config_content = """
llm:
  enabled: false
  provider: "openai"
  model: "gpt-4o-mini"
  api_key: "test-key"

tmdb:
  api_key: "test-tmdb-key"

omdb:
  api_key: "test-omdb-key"

retry:
  max_attempts: 2
  backoff_multiplier: 0

cache:
  backend: "memory"
  key_prefix: "test"

aggregation:
  provider_timeout: 2
  default_limit: 20

workflow:
  tool_timeout: 2
  intent_timeout: 1
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def config_manager(temp_config_file):
    """Create a configuration manager with test config."""
    return ConfigManager(temp_config_file)


@pytest.fixture
def config(config_manager):
    """Load test configuration."""
    return config_manager.load_config()


@pytest.fixture
def container(config_manager):
    """Create a test container."""
    return Container(config_manager)


@pytest.fixture
def cache(config):
    """In-memory cache manager."""
    return CacheManager(MemoryCache(), config.cache)


@pytest.fixture
def make_movie() -> Callable[..., Movie]:
    """Factory for ``Movie`` records with terse rating tuples.

    ``ratings`` is a list of ``(source, value, max_value, votes)`` tuples.
    """

    def _make(
        title: str,
        year: Optional[int] = None,
        source: str = "tmdb",
        ratings: Optional[List[tuple]] = None,
        movie_id: Optional[str] = None,
        external_ids: Optional[Dict[str, str]] = None,
        **fields: Any,
    ) -> Movie:
        return Movie(
            id=movie_id or f"{source}-{title.lower().replace(' ', '-')}",
            title=title,
            year=year,
            sources=[source],
            ratings=[
                Rating(source=s, value=v, max_value=m, votes=n) for s, v, m, n in ratings or []
            ],
            external_ids=ExternalIds(**(external_ids or {})),
            **fields,
        )

    return _make


class FakeProvider(IMovieProvider):
    """Provider adapter returning canned records."""

    def __init__(
        self,
        name: str,
        movies: Optional[List[Movie]] = None,
        details: Optional[Dict[str, Movie]] = None,
        fail: bool = False,
        delay: float = 0.0,
        external_id_key: Optional[str] = None,
    ) -> None:
        self.name = name
        self.external_id_key = external_id_key or name
        self.movies = movies or []
        self.details = details or {}
        self.fail = fail
        self.delay = delay
        self.search_calls: List[Dict[str, Any]] = []
        self.detail_calls: List[str] = []

    async def search(self, query, year=None, page=1, limit=None):
        self.search_calls.append({"query": query, "year": year, "page": page})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            return ProviderResponse(success=False, source=self.name, error="upstream down")
        return ProviderResponse(success=True, source=self.name, data=list(self.movies))

    async def get_by_id(self, movie_id):
        self.detail_calls.append(movie_id)
        movie = self.details.get(movie_id)
        if self.fail or movie is None:
            return ProviderResponse(success=False, source=self.name, error="not found")
        return ProviderResponse(success=True, source=self.name, data=movie)

    async def get_by_external_id(self, external_id, source_type="imdb"):
        self.detail_calls.append(f"{source_type}:{external_id}")
        for movie in self.details.values():
            if getattr(movie.external_ids, source_type, None) == external_id:
                return ProviderResponse(success=True, source=self.name, data=movie)
        return ProviderResponse(success=False, source=self.name, error="not found")


class FakeGateway(IToolGateway):
    """Tool gateway answering from a ``{qualified_name: result}`` table.

    A value that is an exception instance is raised instead of returned; a callable is
    called with the args.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None) -> None:
        self.responses = responses or {}
        self.calls: List[tuple] = []

    async def call_tool(self, qualified_name, args):
        self.calls.append((qualified_name, dict(args)))
        if qualified_name not in self.responses:
            raise RuntimeError(f"unexpected tool call {qualified_name}")
        response = self.responses[qualified_name]
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response(args)
        return response

    async def list_tools(self):
        return [{"name": name} for name in self.responses]

    def called(self, qualified_name: str) -> List[Dict[str, Any]]:
        return [args for name, args in self.calls if name == qualified_name]


@pytest.fixture
def fake_provider() -> Callable[..., FakeProvider]:
    """Factory for fake provider adapters."""
    return FakeProvider


@pytest.fixture
def fake_gateway() -> Callable[..., FakeGateway]:
    """Factory for fake tool gateways."""
    return FakeGateway
