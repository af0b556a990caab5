"""Intent classification data models."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from .movie import CamelModel

IntentType = Literal["search_movies", "get_movie_details", "compare_movies", "recommend_movies"]
StrategyType = Literal["direct_search", "genre_search", "popular_search", "director_search"]


class ExtractedEntities(CamelModel):
    """Entities a classifier pulled out of the query."""

    genres: List[str] = Field(default_factory=list)
    years: List[int] = Field(default_factory=list)
    actors: List[str] = Field(default_factory=list)
    directors: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)

    @field_validator("years", mode="before")
    @classmethod
    def coerce_years(cls, v: Any) -> List[int]:
        """Drop year entries that are not numbers."""
        if not v:
            return []
        years = []
        for item in v:
            try:
                years.append(int(item))
            except (TypeError, ValueError):
                continue
        return years


class SuggestedStrategy(CamelModel):
    """Search strategy suggested by a classifier."""

    type: str
    parameters: Dict[str, Any] = Field(default_factory=dict)


class Intent(CamelModel):
    """Classified intent of a free-text query."""

    type: IntentType
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: Optional[str] = None
    extracted_entities: Optional[ExtractedEntities] = None
    search_strategy: Optional[SuggestedStrategy] = None


class SearchPlan(CamelModel):
    """Concrete search strategy chosen for the search branch."""

    type: StrategyType
    query: Optional[str] = None
    genre_id: Optional[int] = None
    keyword: Optional[str] = None
    director_name: Optional[str] = None
    category: Optional[str] = None
