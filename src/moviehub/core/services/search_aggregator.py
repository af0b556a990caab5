"""Search aggregation across provider adapters."""

from typing import Dict, List, Optional

from ...config.models import Config
from ...infrastructure.cache import CacheManager
from ...infrastructure.logging import LoggerMixin
from ...utils import MovieNotFoundError, settle_all
from ..interfaces import IMovieProvider, ISearchAggregator
from ..models import Movie, ProviderResponse, SearchResponse
from .movie_aggregator import SORT_MODES, MovieAggregator
from .registry import ProviderRegistry


class SearchAggregator(ISearchAggregator, LoggerMixin):
    """Fans a query out to every provider and merges what comes back."""

    def __init__(
        self,
        config: Config,
        providers: ProviderRegistry,
        cache: CacheManager,
        aggregator: Optional[MovieAggregator] = None,
    ) -> None:
        """Initialize search aggregator.

        Args:
            config: Application configuration.
            providers: Provider adapters in priority order.
            cache: Cache manager.
            aggregator: Movie aggregator, a default one if None.
        """
        self._config = config
        self._providers = providers
        self._cache = cache
        self._aggregator = aggregator or MovieAggregator()

    async def search(
        self,
        query: str,
        year: Optional[int] = None,
        page: int = 1,
        limit: Optional[int] = None,
        sort: Optional[str] = None,
    ) -> SearchResponse:
        limit = limit or self._config.aggregation.default_limit
        sort = sort if sort in SORT_MODES else self._config.aggregation.default_sort
        cache_key = CacheManager.search_key(query, year, sort, page)

        cached = await self._cache.get(cache_key)
        if cached is not None:
            self.logger.debug(f"Serving search '{query}' from cache")
            return self._build_response(
                [Movie.model_validate(m) for m in cached["movies"]],
                cached["providers"],
                page,
                limit,
                cached=True,
            )

        providers = self._providers.list()
        outcomes = await settle_all(
            [p.search(query, year, page) for p in providers],
            timeout=self._config.aggregation.provider_timeout,
        )

        combined: List[Movie] = []
        status: Dict[str, bool] = {}
        for provider, outcome in zip(providers, outcomes):
            response = self._unwrap(provider, outcome.value, outcome.error)
            status[provider.name] = response.success
            if response.success:
                combined.extend(response.data or [])

        ranked = self._aggregator.sort_movies(
            self._aggregator.deduplicate_movies(combined), sort, query
        )
        self.logger.info(
            f"Search '{query}': {len(combined)} records from "
            f"{sum(status.values())}/{len(status)} providers, {len(ranked)} after dedupe"
        )

        if any(status.values()):
            await self._cache.set(
                cache_key,
                {"movies": [m.to_dict() for m in ranked], "providers": status},
                self._cache.config.search_ttl,
            )
        else:
            self.logger.warning(f"All providers failed for '{query}', result not cached")

        return self._build_response(ranked, status, page, limit, cached=False)

    def _unwrap(
        self,
        provider: IMovieProvider,
        response: Optional[ProviderResponse],
        error: Optional[BaseException],
    ) -> ProviderResponse:
        if error is not None:
            self.logger.warning(f"Provider {provider.name} failed: {error}")
            return ProviderResponse(success=False, source=provider.name, error=str(error))
        if response is None:
            return ProviderResponse(success=False, source=provider.name, error="No response")
        if not response.success:
            self.logger.warning(f"Provider {provider.name} failed: {response.error}")
        return response

    def _build_response(
        self,
        ranked: List[Movie],
        status: Dict[str, bool],
        page: int,
        limit: int,
        cached: bool,
    ) -> SearchResponse:
        success = any(status.values())
        return SearchResponse(
            success=success,
            data=[self._aggregator.with_rating(m) for m in ranked[:limit]],
            total_results=len(ranked),
            page=page,
            providers=status,
            cached=cached,
            error=None if success else "All providers failed",
        )

    async def get_movie_details(self, movie_id: str) -> Movie:
        cache_key = CacheManager.movie_key(movie_id)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return Movie.model_validate(cached)

        owner = self._providers.owner_of(movie_id)
        if owner is None:
            raise MovieNotFoundError(f"Unrecognized movie id: {movie_id}")

        primary = await owner.get_by_id(movie_id)
        if not primary.success or primary.data is None:
            raise MovieNotFoundError(f"Movie not found: {movie_id} ({primary.error})")

        records = [primary.data] + await self._enrich(owner, primary.data)
        merged = self._aggregator.with_rating(self._aggregator.merge_movies(records))

        await self._cache.set(cache_key, merged.to_dict(), self._cache.config.details_ttl)
        return merged

    async def _enrich(self, owner: IMovieProvider, movie: Movie) -> List[Movie]:
        """Fetch the same title from every other provider, dropping failures."""
        ids = movie.external_ids
        lookups = []
        targets = []
        for provider in self._providers.list():
            if provider is owner:
                continue
            native = getattr(ids, provider.external_id_key, None)
            if native:
                lookups.append(provider.get_by_id(f"{provider.name}-{native}"))
            elif ids.imdb:
                lookups.append(provider.get_by_external_id(ids.imdb, "imdb"))
            else:
                continue
            targets.append(provider)

        outcomes = await settle_all(lookups, timeout=self._config.aggregation.provider_timeout)
        records = []
        for provider, outcome in zip(targets, outcomes):
            response = outcome.value
            if outcome.ok and response is not None and response.success and response.data:
                records.append(response.data)
            else:
                reason = outcome.error if outcome.error else getattr(response, "error", None)
                self.logger.info(f"Enrichment of {movie.id} from {provider.name} failed: {reason}")
        return records
