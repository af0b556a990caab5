"""Search aggregator interface."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import Movie, SearchResponse


class ISearchAggregator(ABC):
    """Multi-provider search and detail aggregation."""

    @abstractmethod
    async def search(
        self,
        query: str,
        year: Optional[int] = None,
        page: int = 1,
        limit: Optional[int] = None,
        sort: Optional[str] = None,
    ) -> SearchResponse:
        """Search every provider and return one merged, ranked list.

        Args:
            query: Title query.
            year: Optional release year.
            page: Provider page.
            limit: Maximum number of results.
            sort: Sort mode.

        Returns:
            Aggregated response. Provider failures never raise.
        """
        pass

    @abstractmethod
    async def get_movie_details(self, movie_id: str) -> Movie:
        """Get a movie merged across every provider that knows it.

        Args:
            movie_id: Source-prefixed id.

        Returns:
            Merged movie with its aggregated rating attached.

        Raises:
            MovieNotFoundError: If the id prefix is unknown or the owner lookup fails.
        """
        pass
