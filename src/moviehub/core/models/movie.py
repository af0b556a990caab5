"""Movie-related data models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        """Serialize using wire aliases, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Rating(CamelModel):
    """A rating from one source, expressed on that source's own scale."""

    source: str = Field(..., description="Provider tag, e.g. imdb, tmdb, rotten_tomatoes")
    value: float = Field(..., description="Rating value on the source scale")
    max_value: float = Field(..., gt=0, description="Upper bound of the source scale")
    votes: Optional[int] = Field(None, ge=0, description="Number of votes, if known")

    def normalized(self) -> float:
        """Rating on a 0-10 scale, clamped to the scale bounds."""
        return min(max(self.value / self.max_value * 10, 0.0), 10.0)


class ExternalIds(CamelModel):
    """Native ids of the same title at each provider."""

    imdb: Optional[str] = None
    tmdb: Optional[str] = None
    tvmaze: Optional[str] = None

    def merged_with(self, other: "ExternalIds") -> "ExternalIds":
        """Overlay the non-empty ids of ``other`` on top of these ones."""
        data = self.model_dump()
        data.update({key: value for key, value in other.model_dump().items() if value})
        return ExternalIds(**data)


class AggregatedRating(CamelModel):
    """Cross-source weighted rating, derived from a movie's ratings."""

    score: float = Field(..., ge=0.0, le=10.0, description="Weighted score on a 0-10 scale")
    breakdown: Dict[str, float] = Field(
        default_factory=dict, description="Per-source normalized 0-10 values"
    )


class Movie(CamelModel):
    """Canonical movie record shared by every provider."""

    id: str = Field(..., description="Source-prefixed id, e.g. tmdb-603")
    title: str = Field(..., description="Display title")
    original_title: Optional[str] = Field(None, description="Title in the original language")
    year: Optional[int] = Field(None, description="Release year")
    release_date: Optional[str] = Field(None, description="ISO release date")
    runtime: Optional[int] = Field(None, ge=0, description="Runtime in minutes")
    genres: List[str] = Field(default_factory=list)
    directors: List[str] = Field(default_factory=list)
    cast: List[str] = Field(default_factory=list)
    plot: Optional[str] = Field(None, description="Plot summary")
    poster: Optional[str] = Field(None, description="Poster image URL")
    backdrop: Optional[str] = Field(None, description="Backdrop image URL")
    ratings: List[Rating] = Field(default_factory=list)
    external_ids: ExternalIds = Field(default_factory=ExternalIds)
    sources: List[str] = Field(default_factory=list, description="Contributing providers")
    aggregated_rating: Optional[AggregatedRating] = Field(
        None, description="Weighted rating attached on the way out"
    )

    def total_votes(self) -> int:
        """Sum of all known vote counts."""
        return sum(rating.votes or 0 for rating in self.ratings)


class ProviderResponse(CamelModel):
    """Envelope every provider adapter returns instead of raising."""

    success: bool
    source: str
    data: Any = None
    error: Optional[str] = None
    total_results: Optional[int] = None


class SearchResponse(CamelModel):
    """Aggregated search response."""

    success: bool
    data: List[Movie] = Field(default_factory=list)
    total_results: int = 0
    page: int = 1
    providers: Dict[str, bool] = Field(
        default_factory=dict, description="Which providers answered successfully"
    )
    cached: bool = False
    error: Optional[str] = None
