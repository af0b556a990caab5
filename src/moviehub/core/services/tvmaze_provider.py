"""TVMaze provider adapter."""

from typing import Any, Dict, List, Optional

from ...config.models import TVMazeConfig
from ...infrastructure.retry import RetryPolicy
from ...utils import ProviderError
from ..models import Movie
from .base_provider import BaseMovieProvider
from .result_normalizer import normalize, normalize_result


class TVMazeProvider(BaseMovieProvider):
    """TVMaze show database adapter."""

    name = "tvmaze"
    external_id_key = "tvmaze"

    def __init__(self, config: TVMazeConfig, retry_policy: RetryPolicy) -> None:
        super().__init__(config.base_url, config.timeout, retry_policy)

    async def search_raw(self, query: str) -> List[Dict[str, Any]]:
        """Search shows; returns TVMaze's ``[{score, show}]`` list."""
        data = await self._get_json("search/shows", {"q": query})
        return data if isinstance(data, list) else []

    async def show_raw(self, show_id: str) -> Dict[str, Any]:
        """Get one show with its cast embedded. A failing cast call is tolerated."""
        show = await self._get_json(f"shows/{show_id}")
        try:
            cast = await self._get_json(f"shows/{show_id}/cast")
        except ProviderError as e:
            self.logger.debug(f"No cast for show {show_id}: {e}")
            cast = []
        show["_embedded"] = {"cast": cast if isinstance(cast, list) else []}
        return show

    async def lookup_raw(self, imdb_id: str) -> Dict[str, Any]:
        """Look a show up by IMDb id."""
        return await self._get_json("lookup/shows", {"imdb": imdb_id})

    async def _search(self, query: str, year: Optional[int], page: int) -> List[Movie]:
        movies = normalize_result(self.name, await self.search_raw(query))
        if year is not None:
            movies = [m for m in movies if m.year is None or m.year == year]
        return movies

    async def _get(self, native_id: str) -> Movie:
        return normalize(self.name, await self.show_raw(native_id))

    async def _get_external(self, external_id: str, source_type: str) -> Movie:
        if source_type == "tvmaze":
            return await self._get(external_id)
        if source_type != "imdb":
            raise ProviderError(
                f"TVMaze only supports IMDb lookups, got {source_type}", provider=self.name
            )
        show = await self.lookup_raw(external_id)
        return await self._get(str(show["id"]))
