"""Summary service interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import MovieSummary


class ISummaryService(ABC):
    """LLM-backed movie summaries."""

    @abstractmethod
    async def summarize(
        self, title: str, plot: Optional[str] = None, genres: Optional[List[str]] = None
    ) -> MovieSummary:
        """Summarize a movie.

        Raises:
            LLMServiceError: If no LLM is configured or generation fails.
        """
        pass
