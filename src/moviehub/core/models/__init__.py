"""Core data models."""

from .intent import ExtractedEntities, Intent, IntentType, SearchPlan, SuggestedStrategy
from .movie import (
    AggregatedRating,
    CamelModel,
    ExternalIds,
    Movie,
    ProviderResponse,
    Rating,
    SearchResponse,
)
from .provider_payloads import (
    OMDbMoviePayload,
    ProviderPayload,
    TMDbMoviePayload,
    TVMazeShowPayload,
)
from .summary import MovieSummary
from .watchlist import WatchlistItem, WatchlistStats, WatchStatus
from .workflow import ExecutionStep, WorkflowResult

__all__ = [
    "CamelModel",
    "Movie",
    "Rating",
    "ExternalIds",
    "AggregatedRating",
    "ProviderResponse",
    "SearchResponse",
    "TMDbMoviePayload",
    "OMDbMoviePayload",
    "TVMazeShowPayload",
    "ProviderPayload",
    "Intent",
    "IntentType",
    "ExtractedEntities",
    "SuggestedStrategy",
    "SearchPlan",
    "ExecutionStep",
    "WorkflowResult",
    "WatchlistItem",
    "WatchlistStats",
    "WatchStatus",
    "MovieSummary",
]
