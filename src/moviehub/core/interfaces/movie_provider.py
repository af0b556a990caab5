"""Movie provider interface."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import ProviderResponse


class IMovieProvider(ABC):
    """Interface for upstream movie catalogs.

    Implementations must be safe to call concurrently and must never raise: failures are
    reported as ``ProviderResponse(success=False, error=...)``.
    """

    #: Provider tag, also the id prefix (``<name>-``) of the records it produces.
    name: str = ""

    #: Key in ``ExternalIds`` that holds this provider's native id.
    external_id_key: str = ""

    @abstractmethod
    async def search(
        self,
        query: str,
        year: Optional[int] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> ProviderResponse:
        """Search the provider.

        Args:
            query: Free text title query.
            year: Optional release year filter.
            page: Result page, 1-based.
            limit: Optional maximum number of records.

        Returns:
            Response whose ``data`` is a list of ``Movie``.
        """
        pass

    @abstractmethod
    async def get_by_id(self, movie_id: str) -> ProviderResponse:
        """Get one record by its source-prefixed id.

        Args:
            movie_id: Id such as ``tmdb-603``.

        Returns:
            Response whose ``data`` is a ``Movie``.
        """
        pass

    @abstractmethod
    async def get_by_external_id(
        self, external_id: str, source_type: str = "imdb"
    ) -> ProviderResponse:
        """Get one record by another provider's id.

        Args:
            external_id: Native id at the other provider.
            source_type: Which provider the id belongs to.

        Returns:
            Response whose ``data`` is a ``Movie``.
        """
        pass

    def owns(self, movie_id: str) -> bool:
        """Check whether an id carries this provider's prefix."""
        return movie_id.startswith(f"{self.name}-")

    def native_id(self, movie_id: str) -> str:
        """Strip this provider's prefix from an id."""
        prefix = f"{self.name}-"
        return movie_id[len(prefix):] if movie_id.startswith(prefix) else movie_id

    async def close(self) -> None:
        """Release network resources."""
        return None
