"""In-memory watchlist store."""

import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import ValidationError

from ...infrastructure.logging import LoggerMixin
from ...utils import ConflictError, MovieHubError, MovieNotFoundError
from ..interfaces import IWatchlistStore
from ..models import WatchlistItem, WatchlistStats

UPDATABLE_FIELDS = ("status", "progress", "rating", "notes")


class InMemoryWatchlistStore(IWatchlistStore, LoggerMixin):
    """Process-local watchlist storage guarded by a lock."""

    def __init__(self) -> None:
        self._items: Dict[str, WatchlistItem] = {}
        self._lock = threading.Lock()

    def add(
        self,
        user_id: str,
        movie_id: str,
        status: str = "want_to_watch",
        rating: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> WatchlistItem:
        try:
            item = WatchlistItem(
                user_id=user_id, movie_id=movie_id, status=status, rating=rating, notes=notes
            )
        except ValidationError as e:
            raise MovieHubError(f"Invalid watchlist item: {e}") from e

        with self._lock:
            for existing in self._items.values():
                if existing.user_id == user_id and existing.movie_id == movie_id:
                    raise ConflictError(f"{movie_id} is already on the watchlist of {user_id}")
            self._items[item.id] = item

        self.logger.debug(f"Added {movie_id} to watchlist of {user_id}")
        return item

    def get(self, item_id: str) -> Optional[WatchlistItem]:
        return self._items.get(item_id)

    def update(self, item_id: str, **changes: object) -> WatchlistItem:
        """Apply changes to an item and bump its ``updated_at``.

        Only status, progress, rating and notes can change; other keys are ignored.

        Raises:
            MovieNotFoundError: If the item does not exist.
            MovieHubError: If a change fails validation.
        """
        with self._lock:
            current = self._items.get(item_id)
            if current is None:
                raise MovieNotFoundError(f"Watchlist item not found: {item_id}")

            data = current.model_dump()
            data.update({k: v for k, v in changes.items() if k in UPDATABLE_FIELDS})
            data["updated_at"] = datetime.now(timezone.utc)
            try:
                updated = WatchlistItem.model_validate(data)
            except ValidationError as e:
                raise MovieHubError(f"Invalid watchlist update: {e}") from e
            self._items[item_id] = updated
        return updated

    def delete(self, item_id: str) -> bool:
        with self._lock:
            return self._items.pop(item_id, None) is not None

    def list_for_user(self, user_id: str, status: Optional[str] = None) -> List[WatchlistItem]:
        items = [
            item
            for item in self._items.values()
            if item.user_id == user_id and (status is None or item.status == status)
        ]
        return sorted(items, key=lambda item: item.updated_at, reverse=True)

    def stats(self, user_id: str) -> WatchlistStats:
        items = self.list_for_user(user_id)
        ratings = [item.rating for item in items if item.rating is not None]
        return WatchlistStats(
            total=len(items),
            want_to_watch=sum(1 for item in items if item.status == "want_to_watch"),
            watching=sum(1 for item in items if item.status == "watching"),
            watched=sum(1 for item in items if item.status == "watched"),
            average_rating=round(sum(ratings) / len(ratings), 1) if ratings else None,
        )
