"""Shared HTTP plumbing for provider adapters."""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import aiohttp

from ...infrastructure.logging import LoggerMixin
from ...infrastructure.retry import TRANSIENT_STATUSES, RetryPolicy
from ...utils import ProviderError
from ..interfaces import IMovieProvider
from ..models import Movie, ProviderResponse


class BaseMovieProvider(IMovieProvider, LoggerMixin, ABC):
    """Provider adapter built on one lazily created aiohttp session.

    Subclasses implement the ``_search``, ``_get`` and ``_get_external`` coroutines, which
    may raise. The public ``IMovieProvider`` methods wrap them and never raise.
    """

    def __init__(self, base_url: str, timeout: float, retry_policy: RetryPolicy) -> None:
        """Initialize provider.

        Args:
            base_url: Upstream API base URL.
            timeout: Total request timeout in seconds.
            retry_policy: Retry policy for transient failures.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retry = retry_policy
        self._session: Optional[aiohttp.ClientSession] = None

    async def search(
        self,
        query: str,
        year: Optional[int] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> ProviderResponse:
        try:
            movies = await self._search(query, year, page)
        except Exception as e:
            return self._failure(f"search '{query}'", e)
        total = len(movies)
        if limit is not None:
            movies = movies[:limit]
        self.logger.debug(f"{self.name} search '{query}' returned {len(movies)} movies")
        return ProviderResponse(success=True, source=self.name, data=movies, total_results=total)

    async def get_by_id(self, movie_id: str) -> ProviderResponse:
        if not self.owns(movie_id):
            return ProviderResponse(
                success=False,
                source=self.name,
                error=f"Id {movie_id} does not belong to {self.name}",
            )
        try:
            movie = await self._get(self.native_id(movie_id))
        except Exception as e:
            return self._failure(f"lookup {movie_id}", e)
        return ProviderResponse(success=True, source=self.name, data=movie)

    async def get_by_external_id(
        self, external_id: str, source_type: str = "imdb"
    ) -> ProviderResponse:
        try:
            movie = await self._get_external(external_id, source_type)
        except Exception as e:
            return self._failure(f"lookup {source_type}:{external_id}", e)
        return ProviderResponse(success=True, source=self.name, data=movie)

    def _failure(self, action: str, error: Exception) -> ProviderResponse:
        self.logger.warning(f"{self.name} {action} failed: {error}")
        return ProviderResponse(success=False, source=self.name, error=str(error))

    @abstractmethod
    async def _search(self, query: str, year: Optional[int], page: int) -> List[Movie]:
        pass

    @abstractmethod
    async def _get(self, native_id: str) -> Movie:
        pass

    @abstractmethod
    async def _get_external(self, external_id: str, source_type: str) -> Movie:
        pass

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a JSON document, retrying transient failures.

        Args:
            path: Path relative to the base URL, or an absolute URL.
            params: Query parameters; None values are dropped.

        Returns:
            Decoded JSON.

        Raises:
            ProviderError: If the request fails for good.
        """
        url = path if path.startswith("http") else f"{self._base_url}/{path.lstrip('/')}"
        clean = {k: v for k, v in (params or {}).items() if v is not None}
        return await self._retry.call(self._request_json, url, clean)

    async def _request_json(self, url: str, params: Dict[str, Any]) -> Any:
        try:
            async with self._get_session().get(url, params=params) as response:
                if response.status == 404:
                    raise ProviderError(f"Not found: {url}", provider=self.name, status=404)
                if response.status >= 400:
                    raise ProviderError(
                        f"HTTP {response.status} from {self.name}",
                        provider=self.name,
                        status=response.status,
                        transient=response.status in TRANSIENT_STATUSES,
                    )
                return await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"{self.name} request timed out", provider=self.name, transient=True
            ) from e
        except aiohttp.ClientError as e:
            raise ProviderError(
                f"{self.name} request failed: {e}",
                provider=self.name,
                transient=isinstance(e, aiohttp.ClientConnectionError),
            ) from e

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "BaseMovieProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
