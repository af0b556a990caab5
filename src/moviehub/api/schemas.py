"""Request and response schemas for the HTTP API.

Bodies use camelCase aliases on the wire and accept snake_case field names too.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from ..core.models import CamelModel, Movie, WatchStatus

# =============================================================================
# HEALTH
# =============================================================================


class HealthResponse(CamelModel):
    """Health check response schema."""

    status: str = Field(examples=["healthy"])
    version: str
    cache: bool = Field(description="Whether the cache backend answers")
    llm: bool = Field(description="Whether an LLM service is configured")
    providers: List[str] = Field(default_factory=list)
    tools: int = Field(default=0, description="Number of locally registered tools")


# =============================================================================
# MOVIES
# =============================================================================


class MergeRequest(CamelModel):
    """Records of one title from several providers."""

    movies: List[Movie] = Field(..., description="Movies to merge, highest priority first")


class SummaryRequest(CamelModel):
    """Summary generation request."""

    title: str = Field(..., min_length=1)
    plot: Optional[str] = None
    genres: Optional[List[str]] = None


# =============================================================================
# WORKFLOW
# =============================================================================


class ExecuteRequest(CamelModel):
    """Natural language query for the workflow orchestrator."""

    query: str = Field(..., min_length=1, examples=["compare Inception and Interstellar"])
    user_id: Optional[str] = None


class CallToolRequest(CamelModel):
    """Single tool invocation through the gateway."""

    tool_name: str = Field(..., min_length=1, examples=["tmdb.search_movies"])
    args: Dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# WATCHLIST
# =============================================================================


class WatchlistAddRequest(CamelModel):
    """Add a movie to a watchlist."""

    movie_id: str = Field(..., min_length=1)
    status: WatchStatus = "want_to_watch"
    rating: Optional[int] = Field(None, ge=1, le=10)
    notes: Optional[str] = None


class WatchlistUpdateRequest(CamelModel):
    """Partial update of a watchlist item. Only the fields sent are changed."""

    status: Optional[WatchStatus] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    rating: Optional[int] = Field(None, ge=1, le=10)
    notes: Optional[str] = None
