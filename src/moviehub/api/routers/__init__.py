"""API routers."""

from . import search, watchlist, workflow

__all__ = ["search", "watchlist", "workflow"]
