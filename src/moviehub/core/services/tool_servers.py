"""Tool servers exposing provider operations to the workflow gateway.

Tool results are the upstream providers' native payloads; the workflow normalizes them.
"""

from typing import Any, Awaitable, Callable, Dict, List

from ...infrastructure.logging import LoggerMixin
from ...utils import ProviderError, ToolCallError, ToolNotFoundError
from ..interfaces import IToolServer, IWatchlistStore, ToolSpec
from .omdb_provider import OMDbProvider
from .tmdb_provider import TMDbProvider
from .tvmaze_provider import TVMazeProvider

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Any]]


def _schema(properties: Dict[str, str], required: List[str]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {name: {"type": kind} for name, kind in properties.items()},
        "required": required,
    }


class BaseToolServer(IToolServer, LoggerMixin):
    """Tool server with a handler table and required-argument checks."""

    def __init__(self) -> None:
        self._handlers: Dict[str, ToolHandler] = {}
        self._specs: List[ToolSpec] = []

    def _add_tool(self, spec: ToolSpec, handler: ToolHandler) -> None:
        self._specs.append(spec)
        self._handlers[spec.name] = handler

    @property
    def tools(self) -> List[ToolSpec]:
        return list(self._specs)

    async def call(self, tool: str, args: Dict[str, Any]) -> Any:
        handler = self._handlers.get(tool)
        if handler is None:
            raise ToolNotFoundError(f"Tool not found: {self.name}.{tool}")

        spec = next(s for s in self._specs if s.name == tool)
        missing = [name for name in spec.required if args.get(name) in (None, "")]
        if missing:
            raise ToolCallError(f"{self.name}.{tool} missing required arguments: {missing}")

        self.logger.debug(f"Calling {self.name}.{tool} with {args}")
        return await handler(args)


class TMDbToolServer(BaseToolServer):
    """TMDb catalog tools."""

    name = "tmdb"
    description = "The Movie Database catalog"

    def __init__(self, provider: TMDbProvider) -> None:
        super().__init__()
        self._provider = provider
        self._add_tool(
            ToolSpec(
                name="search_movies",
                description="Search movies by title",
                input_schema=_schema(
                    {"query": "string", "year": "integer", "page": "integer"}, ["query"]
                ),
            ),
            self._search_movies,
        )
        self._add_tool(
            ToolSpec(
                name="get_movie_details",
                description="Get full details of a TMDb movie",
                input_schema=_schema({"movieId": "string"}, ["movieId"]),
            ),
            self._get_movie_details,
        )
        self._add_tool(
            ToolSpec(
                name="get_movie_by_external_id",
                description="Find a TMDb movie by an IMDb id",
                input_schema=_schema({"externalId": "string", "source": "string"}, ["externalId"]),
            ),
            self._get_movie_by_external_id,
        )
        self._add_tool(
            ToolSpec(
                name="get_popular_movies",
                description="Get currently popular movies",
                input_schema=_schema({"page": "integer"}, []),
            ),
            self._get_popular_movies,
        )
        self._add_tool(
            ToolSpec(
                name="discover_movies",
                description="Discover movies by genre",
                input_schema=_schema(
                    {"genreId": "integer", "sortBy": "string", "page": "integer"}, ["genreId"]
                ),
            ),
            self._discover_movies,
        )
        self._add_tool(
            ToolSpec(
                name="search_movies_by_director",
                description="List the movies a person directed",
                input_schema=_schema({"directorName": "string"}, ["directorName"]),
            ),
            self._search_movies_by_director,
        )

    async def _search_movies(self, args: Dict[str, Any]) -> Any:
        return await self._provider.search_raw(
            str(args["query"]), args.get("year"), int(args.get("page") or 1)
        )

    async def _get_movie_details(self, args: Dict[str, Any]) -> Any:
        return await self._provider.details_raw(self._provider.native_id(str(args["movieId"])))

    async def _get_movie_by_external_id(self, args: Dict[str, Any]) -> Any:
        source = args.get("source") or "imdb"
        data = await self._provider.find_raw(str(args["externalId"]), source)
        matches = data.get("movie_results") or []
        if not matches:
            raise ProviderError(f"No TMDb movie for {source} id {args['externalId']}", "tmdb", 404)
        return await self._provider.details_raw(str(matches[0]["id"]))

    async def _get_popular_movies(self, args: Dict[str, Any]) -> Any:
        return await self._provider.popular_raw(int(args.get("page") or 1))

    async def _discover_movies(self, args: Dict[str, Any]) -> Any:
        return await self._provider.discover_raw(
            int(args["genreId"]),
            args.get("sortBy") or "popularity.desc",
            int(args.get("page") or 1),
        )

    async def _search_movies_by_director(self, args: Dict[str, Any]) -> Any:
        return await self._provider.director_movies_raw(str(args["directorName"]))


class OMDbToolServer(BaseToolServer):
    """OMDb ratings database tools."""

    name = "omdb"
    description = "Open Movie Database"

    def __init__(self, provider: OMDbProvider) -> None:
        super().__init__()
        self._provider = provider
        self._add_tool(
            ToolSpec(
                name="search_movies",
                description="Search titles",
                input_schema=_schema(
                    {"query": "string", "year": "integer", "type": "string", "page": "integer"},
                    ["query"],
                ),
            ),
            self._search_movies,
        )
        self._add_tool(
            ToolSpec(
                name="get_movie_by_id",
                description="Get a title by IMDb id",
                input_schema=_schema({"imdbId": "string", "plot": "string"}, ["imdbId"]),
            ),
            self._get_movie_by_id,
        )

    async def _search_movies(self, args: Dict[str, Any]) -> Any:
        return await self._provider.search_raw(
            str(args["query"]), args.get("year"), int(args.get("page") or 1), args.get("type")
        )

    async def _get_movie_by_id(self, args: Dict[str, Any]) -> Any:
        imdb_id = self._provider.native_id(str(args["imdbId"]))
        return await self._provider.details_raw(imdb_id, args.get("plot") or "full")


class TVMazeToolServer(BaseToolServer):
    """TVMaze show database tools."""

    name = "tvmaze"
    description = "TVMaze show database"

    def __init__(self, provider: TVMazeProvider) -> None:
        super().__init__()
        self._provider = provider
        self._add_tool(
            ToolSpec(
                name="search_shows",
                description="Search shows by name",
                input_schema=_schema({"query": "string"}, ["query"]),
            ),
            self._search_shows,
        )
        self._add_tool(
            ToolSpec(
                name="get_show",
                description="Get a show with its cast",
                input_schema=_schema({"showId": "string"}, ["showId"]),
            ),
            self._get_show,
        )

    async def _search_shows(self, args: Dict[str, Any]) -> Any:
        return {"results": await self._provider.search_raw(str(args["query"]))}

    async def _get_show(self, args: Dict[str, Any]) -> Any:
        return await self._provider.show_raw(self._provider.native_id(str(args["showId"])))


class UserToolServer(BaseToolServer):
    """User service tools backed by the watchlist store."""

    name = "user"
    description = "User watchlists"

    def __init__(self, store: IWatchlistStore) -> None:
        super().__init__()
        self._store = store
        self._add_tool(
            ToolSpec(
                name="get_watchlist",
                description="Get a user's watchlist",
                input_schema=_schema({"userId": "string", "status": "string"}, ["userId"]),
            ),
            self._get_watchlist,
        )

    async def _get_watchlist(self, args: Dict[str, Any]) -> Any:
        user_id = str(args["userId"])
        items = self._store.list_for_user(user_id, args.get("status"))
        return {"userId": user_id, "movies": [item.to_dict() for item in items]}
