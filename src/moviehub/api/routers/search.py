"""Search, detail, merge and summary endpoints."""

from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Query

from ...utils import EmptyInputError
from ..dependencies import (
    MovieAggregatorDep,
    SearchAggregatorDep,
    SummaryServiceDep,
)
from ..schemas import MergeRequest, SummaryRequest

router = APIRouter(prefix="/api", tags=["Movies"])


@router.get("/search", summary="Search all providers")
async def search_movies(
    aggregator: SearchAggregatorDep,
    query: Annotated[Optional[str], Query(description="Free-text query")] = None,
    year: Annotated[Optional[int], Query(ge=1800, le=2100)] = None,
    page: Annotated[int, Query(ge=1, le=1000)] = 1,
    limit: Annotated[Optional[int], Query(ge=1, le=100)] = None,
    sort: Annotated[Optional[str], Query(description="Sort mode")] = None,
) -> Dict[str, Any]:
    """Fan the query out to every provider and return the merged ranking.

    Raises:
        EmptyInputError: 400 if ``query`` is missing or blank.
    """
    if not query or not query.strip():
        raise EmptyInputError("Missing required parameter: query")
    response = await aggregator.search(query.strip(), year=year, page=page, limit=limit, sort=sort)
    return response.to_dict()


@router.get("/movie/{movie_id}", summary="Get merged movie details")
async def get_movie(movie_id: str, aggregator: SearchAggregatorDep) -> Dict[str, Any]:
    """Resolve a provider-prefixed id and enrich it from the other providers.

    Raises:
        MovieNotFoundError: 404 if no provider resolves the id.
    """
    movie = await aggregator.get_movie_details(movie_id)
    return {"success": True, "data": movie.to_dict()}


@router.post("/merge", summary="Merge records of one title")
async def merge_movies(request: MergeRequest, aggregator: MovieAggregatorDep) -> Dict[str, Any]:
    merged = aggregator.with_rating(aggregator.merge_movies(request.movies))
    return {"success": True, "data": merged.to_dict()}


@router.post("/movie/summary", summary="Generate an LLM summary")
async def summarize_movie(request: SummaryRequest, service: SummaryServiceDep) -> Dict[str, Any]:
    summary = await service.summarize(request.title, request.plot, request.genres)
    return {"success": True, "data": summary.to_dict()}
