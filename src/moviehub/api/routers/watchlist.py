"""Watchlist endpoints."""

from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Query, status

from ...utils import MovieNotFoundError
from ..dependencies import WatchlistStoreDep
from ..schemas import WatchlistAddRequest, WatchlistUpdateRequest

router = APIRouter(prefix="/api", tags=["Watchlist"])


@router.get("/users/{user_id}/watchlist", summary="List a user's watchlist")
def list_watchlist(
    user_id: str,
    store: WatchlistStoreDep,
    status_filter: Annotated[Optional[str], Query(alias="status")] = None,
) -> Dict[str, Any]:
    items = store.list_for_user(user_id, status_filter)
    return {"success": True, "data": [item.to_dict() for item in items]}


@router.post(
    "/users/{user_id}/watchlist",
    status_code=status.HTTP_201_CREATED,
    summary="Add a movie to a watchlist",
)
def add_to_watchlist(
    user_id: str, request: WatchlistAddRequest, store: WatchlistStoreDep
) -> Dict[str, Any]:
    """Add a movie.

    Raises:
        ConflictError: 409 if the movie is already on the user's watchlist.
    """
    item = store.add(user_id, request.movie_id, request.status, request.rating, request.notes)
    return {"success": True, "data": item.to_dict()}


@router.get("/users/{user_id}/watchlist/stats", summary="Watchlist statistics")
def watchlist_stats(user_id: str, store: WatchlistStoreDep) -> Dict[str, Any]:
    return {"success": True, "data": store.stats(user_id).to_dict()}


@router.patch("/watchlist/{item_id}", summary="Update a watchlist item")
def update_watchlist_item(
    item_id: str, request: WatchlistUpdateRequest, store: WatchlistStoreDep
) -> Dict[str, Any]:
    item = store.update(item_id, **request.model_dump(exclude_unset=True))
    return {"success": True, "data": item.to_dict()}


@router.delete("/watchlist/{item_id}", summary="Remove a watchlist item")
def delete_watchlist_item(item_id: str, store: WatchlistStoreDep) -> Dict[str, Any]:
    if not store.delete(item_id):
        raise MovieNotFoundError(f"Watchlist item not found: {item_id}")
    return {"success": True}
