"""LLM summary data models."""

from typing import List

from pydantic import Field

from .movie import CamelModel


class MovieSummary(CamelModel):
    """Generated summary, highlights and similar titles for a movie."""

    title: str
    summary: str
    highlights: List[str] = Field(default_factory=list)
    similar_movies: List[str] = Field(default_factory=list)
