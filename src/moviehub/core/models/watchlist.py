"""Watchlist data models."""

import uuid
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import Field

from .movie import CamelModel

WatchStatus = Literal["want_to_watch", "watching", "watched"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WatchlistItem(CamelModel):
    """One movie on a user's watchlist."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str = Field(..., min_length=1)
    movie_id: str = Field(..., min_length=1)
    status: WatchStatus = "want_to_watch"
    progress: int = Field(default=0, ge=0, le=100, description="Viewing progress in percent")
    rating: Optional[int] = Field(None, ge=1, le=10, description="User rating")
    notes: Optional[str] = None
    added_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class WatchlistStats(CamelModel):
    """Per-user watchlist counters."""

    total: int = 0
    want_to_watch: int = 0
    watching: int = 0
    watched: int = 0
    average_rating: Optional[float] = None
