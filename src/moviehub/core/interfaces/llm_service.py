"""LLM service interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import Intent


class ILLMService(ABC):
    """Interface for LLM services."""

    @abstractmethod
    async def analyze_intent(self, query: str, context: str = "movie_search") -> Intent:
        """Classify the intent of a free-text query.

        Args:
            query: User query.
            context: Free-form hint about the calling feature.

        Returns:
            Classified intent.

        Raises:
            LLMServiceError: If the request fails.
            MalformedResponseError: If the answer cannot be parsed.
        """
        pass

    @abstractmethod
    async def generate_summary(
        self, title: str, plot: Optional[str] = None, genres: Optional[List[str]] = None
    ) -> str:
        """Write a short summary of a movie."""
        pass

    @abstractmethod
    async def generate_highlights(
        self, title: str, plot: Optional[str] = None, genres: Optional[List[str]] = None
    ) -> List[str]:
        """List three highlights of a movie."""
        pass

    @abstractmethod
    async def generate_similar_movies(
        self, title: str, genres: Optional[List[str]] = None
    ) -> List[str]:
        """Suggest five similar titles."""
        pass
