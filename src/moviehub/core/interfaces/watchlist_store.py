"""Watchlist store interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import WatchlistItem, WatchlistStats


class IWatchlistStore(ABC):
    """CRUD over watchlist items, unique per (user, movie) pair."""

    @abstractmethod
    def add(
        self,
        user_id: str,
        movie_id: str,
        status: str = "want_to_watch",
        rating: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> WatchlistItem:
        """Add a movie to a user's watchlist.

        Raises:
            ConflictError: If the user already has this movie.
        """
        pass

    @abstractmethod
    def get(self, item_id: str) -> Optional[WatchlistItem]:
        """Get an item by id."""
        pass

    @abstractmethod
    def update(self, item_id: str, **changes: object) -> WatchlistItem:
        """Update status, progress, rating or notes.

        Raises:
            MovieNotFoundError: If the item does not exist.
        """
        pass

    @abstractmethod
    def delete(self, item_id: str) -> bool:
        """Delete an item. Returns False if it did not exist."""
        pass

    @abstractmethod
    def list_for_user(self, user_id: str, status: Optional[str] = None) -> List[WatchlistItem]:
        """List a user's items, most recently updated first."""
        pass

    @abstractmethod
    def stats(self, user_id: str) -> WatchlistStats:
        """Count a user's items per status."""
        pass
