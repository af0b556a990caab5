"""LLM-backed movie summaries with caching."""

import asyncio
from typing import List, Optional

from ...infrastructure.cache import CacheManager
from ...infrastructure.logging import LoggerMixin
from ...utils import EmptyInputError, LLMServiceError
from ..interfaces import ILLMService, ISummaryService
from ..models import MovieSummary


class MovieSummaryService(ISummaryService, LoggerMixin):
    """Generates a summary, highlights and similar titles in one round trip."""

    def __init__(self, llm_service: Optional[ILLMService], cache: CacheManager) -> None:
        """Initialize summary service.

        Args:
            llm_service: LLM service, None when no LLM is configured.
            cache: Cache manager.
        """
        self._llm_service = llm_service
        self._cache = cache

    @property
    def available(self) -> bool:
        return self._llm_service is not None

    async def summarize(
        self, title: str, plot: Optional[str] = None, genres: Optional[List[str]] = None
    ) -> MovieSummary:
        if not title or not title.strip():
            raise EmptyInputError("Movie title is required")
        if self._llm_service is None:
            raise LLMServiceError("No LLM service configured")

        llm = self._llm_service

        async def generate() -> dict:
            summary, highlights, similar = await asyncio.gather(
                llm.generate_summary(title, plot, genres),
                llm.generate_highlights(title, plot, genres),
                llm.generate_similar_movies(title, genres),
            )
            self.logger.info(f"Generated summary for '{title}'")
            return MovieSummary(
                title=title, summary=summary, highlights=highlights, similar_movies=similar
            ).to_dict()

        data = await self._cache.get_or_set(
            CacheManager.summary_key("full", title), self._cache.config.summary_ttl, generate
        )
        return MovieSummary.model_validate(data)
