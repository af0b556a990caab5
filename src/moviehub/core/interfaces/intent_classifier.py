"""Intent classifier interface."""

from abc import ABC, abstractmethod

from ..models import Intent


class IIntentClassifier(ABC):
    """Maps a free-text query to one of the four workflow intents."""

    #: Name recorded as the ``tool`` of the trace entry.
    name: str = ""

    @abstractmethod
    async def classify(self, query: str, context: str = "movie_search") -> Intent:
        """Classify a query.

        Args:
            query: User query.
            context: Free-form hint about the calling feature.

        Returns:
            Classified intent.
        """
        pass
