"""OMDb provider adapter."""

import asyncio
from typing import Any, Dict, List, Optional

from ...config.models import OMDbConfig
from ...infrastructure.retry import RetryPolicy
from ...utils import MalformedResponseError, ProviderError
from ..models import Movie
from .base_provider import BaseMovieProvider
from .result_normalizer import normalize


class OMDbProvider(BaseMovieProvider):
    """OMDb adapter. Search rows carry no ratings, so ``search`` enriches each hit."""

    name = "omdb"
    external_id_key = "imdb"

    def __init__(self, config: OMDbConfig, retry_policy: RetryPolicy) -> None:
        """Initialize OMDb provider.

        Args:
            config: OMDb configuration.
            retry_policy: Retry policy for transient failures.
        """
        super().__init__(config.base_url, config.timeout, retry_policy)
        self._config = config

    async def _query(self, **params: Any) -> Dict[str, Any]:
        data = await self._get_json("", {"apikey": self._config.api_key, **params})
        if not isinstance(data, dict) or data.get("Response") == "False":
            error = data.get("Error", "Unknown error") if isinstance(data, dict) else "Bad payload"
            status = 404 if "not found" in str(error).lower() else 0
            raise ProviderError(f"OMDb error: {error}", provider=self.name, status=status)
        return data

    async def search_raw(
        self, query: str, year: Optional[int] = None, page: int = 1, type_: Optional[str] = None
    ) -> Dict[str, Any]:
        """Search titles. ``Response == "False"`` is reported as a ``ProviderError``."""
        return await self._query(s=query, y=year, page=page, type=type_)

    async def details_raw(self, imdb_id: str, plot: str = "short") -> Dict[str, Any]:
        """Get the full record of one IMDb id."""
        return await self._query(i=imdb_id, plot=plot)

    async def _search(self, query: str, year: Optional[int], page: int) -> List[Movie]:
        data = await self.search_raw(query, year, page)
        rows = data.get("Search") or []
        details = await asyncio.gather(
            *(self.details_raw(row["imdbID"]) for row in rows if row.get("imdbID")),
            return_exceptions=True,
        )

        movies = []
        for row, detail in zip([r for r in rows if r.get("imdbID")], details):
            if isinstance(detail, Exception):
                self.logger.debug(f"Using search row for {row['imdbID']}: {detail}")
                detail = row
            try:
                movies.append(normalize(self.name, detail))
            except MalformedResponseError as e:
                self.logger.warning(f"Skipping OMDb row {row['imdbID']}: {e}")
        return movies

    async def _get(self, native_id: str) -> Movie:
        return normalize(self.name, await self.details_raw(native_id, plot="full"))

    async def _get_external(self, external_id: str, source_type: str) -> Movie:
        if source_type != "imdb":
            raise ProviderError(
                f"OMDb only supports IMDb ids, got {source_type}", provider=self.name
            )
        return await self._get(external_id)
