"""TMDb provider adapter."""

from typing import Any, Dict, List, Optional

from ...config.models import TMDbConfig
from ...infrastructure.retry import RetryPolicy
from ...utils import ProviderError
from ..models import Movie
from .base_provider import BaseMovieProvider
from .result_normalizer import normalize, normalize_result


class TMDbProvider(BaseMovieProvider):
    """TMDb catalog adapter.

    The ``*_raw`` methods return TMDb's native JSON and back the ``tmdb`` tool server.
    """

    name = "tmdb"
    external_id_key = "tmdb"

    def __init__(self, config: TMDbConfig, retry_policy: RetryPolicy) -> None:
        """Initialize TMDb provider.

        Args:
            config: TMDb configuration.
            retry_policy: Retry policy for transient failures.
        """
        super().__init__(config.base_url, config.timeout, retry_policy)
        self._config = config

    @property
    def image_base_url(self) -> str:
        return self._config.image_base_url

    def _params(self, **extra: Any) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "api_key": self._config.api_key,
            "language": self._config.language,
        }
        params.update(extra)
        return params

    async def search_raw(
        self, query: str, year: Optional[int] = None, page: int = 1
    ) -> Dict[str, Any]:
        """Search movies by title."""
        return await self._get_json(
            "search/movie", self._params(query=query, year=year, page=page, include_adult="false")
        )

    async def details_raw(self, movie_id: str) -> Dict[str, Any]:
        """Get a movie with credits and external ids appended."""
        return await self._get_json(
            f"movie/{movie_id}", self._params(append_to_response="credits,external_ids")
        )

    async def find_raw(self, external_id: str, source_type: str = "imdb") -> Dict[str, Any]:
        """Find movies by an external id."""
        return await self._get_json(
            f"find/{external_id}", self._params(external_source=f"{source_type}_id")
        )

    async def popular_raw(self, page: int = 1) -> Dict[str, Any]:
        """Get the popular movies list."""
        return await self._get_json("movie/popular", self._params(page=page))

    async def discover_raw(
        self, genre_id: int, sort_by: str = "popularity.desc", page: int = 1
    ) -> Dict[str, Any]:
        """Discover movies of one genre."""
        return await self._get_json(
            "discover/movie", self._params(with_genres=genre_id, sort_by=sort_by, page=page)
        )

    async def director_movies_raw(self, name: str) -> Dict[str, Any]:
        """Get the movies a person directed.

        Args:
            name: Director name.

        Returns:
            ``{"director": <matched name>, "results": [movie, ...]}``, most popular first.

        Raises:
            ProviderError: If no person matches the name.
        """
        people = await self._get_json("search/person", self._params(query=name))
        results = people.get("results") or []
        if not results:
            raise ProviderError(f"No person found for '{name}'", provider=self.name, status=404)
        person = results[0]
        credits = await self._get_json(f"person/{person['id']}/movie_credits", self._params())
        directed = [c for c in credits.get("crew") or [] if c.get("job") == "Director"]
        directed.sort(key=lambda c: c.get("popularity") or 0, reverse=True)
        return {"director": person.get("name", name), "results": directed}

    async def _search(self, query: str, year: Optional[int], page: int) -> List[Movie]:
        data = await self.search_raw(query, year, page)
        return normalize_result(self.name, data, self.image_base_url)

    async def _get(self, native_id: str) -> Movie:
        data = await self.details_raw(native_id)
        return normalize(self.name, data, self.image_base_url)

    async def _get_external(self, external_id: str, source_type: str) -> Movie:
        if source_type == "tmdb":
            return await self._get(external_id)
        data = await self.find_raw(external_id, source_type)
        matches = data.get("movie_results") or []
        if not matches:
            raise ProviderError(
                f"No TMDb movie for {source_type} id {external_id}", provider=self.name, status=404
            )
        # find rows lack credits, so fetch the full record
        return await self._get(str(matches[0]["id"]))
