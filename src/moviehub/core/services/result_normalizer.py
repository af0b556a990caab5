"""Normalization of native provider payloads into ``Movie`` records.

Every provider has one typed payload model and one pure function that maps it into the
canonical shape. Adapters and the workflow orchestrator share these functions so a
record looks the same no matter which path fetched it.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from ...utils import (
    MalformedResponseError,
    extract_year,
    is_missing,
    parse_float,
    parse_int,
    split_list,
    strip_html_tags,
)
from ..models import (
    ExternalIds,
    Movie,
    OMDbMoviePayload,
    ProviderPayload,
    Rating,
    TMDbMoviePayload,
    TVMazeShowPayload,
)

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"
MAX_CAST = 10

TMDB_GENRE_NAMES: Dict[int, str] = {
    28: "Action",
    12: "Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    14: "Fantasy",
    36: "History",
    27: "Horror",
    10402: "Music",
    9648: "Mystery",
    10749: "Romance",
    878: "Science Fiction",
    10770: "TV Movie",
    53: "Thriller",
    10752: "War",
    37: "Western",
}

_PAYLOAD_MODELS = {
    "tmdb": TMDbMoviePayload,
    "omdb": OMDbMoviePayload,
    "tvmaze": TVMazeShowPayload,
}


def _image_url(base_url: str, path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    if path.startswith("http"):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def normalize_tmdb(
    payload: TMDbMoviePayload, image_base_url: str = DEFAULT_IMAGE_BASE_URL
) -> Movie:
    """Map a TMDb movie payload into a ``Movie``.

    Args:
        payload: TMDb search row or detail record.
        image_base_url: Prefix for poster and backdrop paths.

    Returns:
        Normalized movie.
    """
    title = payload.title or payload.name or ""
    poster = _image_url(image_base_url, payload.poster_path)
    backdrop = _image_url(image_base_url, payload.backdrop_path)

    if payload.genres:
        genres = [genre.name for genre in payload.genres]
    else:
        genres = [TMDB_GENRE_NAMES[gid] for gid in payload.genre_ids if gid in TMDB_GENRE_NAMES]

    directors: List[str] = []
    cast: List[str] = []
    if payload.credits:
        directors = [m.name for m in payload.credits.crew if m.job == "Director"]
        ordered = sorted(
            payload.credits.cast, key=lambda m: m.order if m.order is not None else 1_000_000
        )
        cast = [m.name for m in ordered[:MAX_CAST]]

    imdb_id = payload.imdb_id or (payload.external_ids.imdb_id if payload.external_ids else None)

    ratings = []
    if payload.vote_average is not None and (payload.vote_count or payload.vote_average > 0):
        ratings.append(
            Rating(
                source="tmdb",
                value=payload.vote_average,
                max_value=10,
                votes=payload.vote_count,
            )
        )

    return Movie(
        id=f"tmdb-{payload.id}",
        title=title,
        original_title=payload.original_title,
        year=extract_year(payload.release_date),
        release_date=payload.release_date or None,
        runtime=payload.runtime or None,
        genres=genres,
        directors=directors,
        cast=cast,
        plot=payload.overview or None,
        poster=poster or backdrop,
        backdrop=backdrop or poster,
        ratings=ratings,
        external_ids=ExternalIds(tmdb=str(payload.id), imdb=imdb_id or None),
        sources=["tmdb"],
    )


def _parse_omdb_date(value: Optional[str]) -> Optional[str]:
    if is_missing(value):
        return None
    try:
        return datetime.strptime(str(value), "%d %b %Y").date().isoformat()
    except ValueError:
        return str(value)


def _omdb_ratings(payload: OMDbMoviePayload) -> List[Rating]:
    ratings: List[Rating] = []

    imdb_value = parse_float(payload.imdb_rating)
    if imdb_value is not None:
        ratings.append(
            Rating(
                source="imdb",
                value=imdb_value,
                max_value=10,
                votes=parse_int(payload.imdb_votes),
            )
        )

    seen_metacritic = False
    for entry in payload.ratings:
        if entry.source == "Rotten Tomatoes":
            value = parse_int(entry.value)
            if value is not None:
                ratings.append(Rating(source="rotten_tomatoes", value=value, max_value=100))
        elif entry.source == "Metacritic":
            value = parse_int(entry.value.split("/")[0])
            if value is not None:
                ratings.append(Rating(source="metacritic", value=value, max_value=100))
                seen_metacritic = True

    if not seen_metacritic:
        metascore = parse_int(payload.metascore)
        if metascore is not None:
            ratings.append(Rating(source="metacritic", value=metascore, max_value=100))

    return ratings


def normalize_omdb(payload: OMDbMoviePayload) -> Movie:
    """Map an OMDb record into a ``Movie``.

    ``N/A`` fields are treated as absent, vote counts and runtimes are parsed from their
    display strings, and Rotten Tomatoes and Metacritic scores are kept on a 100 scale.
    """
    poster = None if is_missing(payload.poster) else payload.poster
    plot = None if is_missing(payload.plot) else payload.plot

    return Movie(
        id=f"omdb-{payload.imdb_id}",
        title=payload.title,
        year=extract_year(payload.year),
        release_date=_parse_omdb_date(payload.released),
        runtime=parse_int(payload.runtime),
        genres=split_list(payload.genre),
        directors=split_list(payload.director),
        cast=split_list(payload.actors)[:MAX_CAST],
        plot=plot,
        poster=poster,
        backdrop=poster,
        ratings=_omdb_ratings(payload),
        external_ids=ExternalIds(imdb=payload.imdb_id),
        sources=["omdb"],
    )


def normalize_tvmaze(payload: TVMazeShowPayload) -> Movie:
    """Map a TVMaze show into a ``Movie``."""
    medium = payload.image.medium if payload.image else None
    original = payload.image.original if payload.image else None

    ratings = []
    if payload.rating and payload.rating.average is not None:
        ratings.append(Rating(source="tvmaze", value=payload.rating.average, max_value=10))

    cast = []
    if payload.embedded:
        cast = [credit.person.name for credit in payload.embedded.cast[:MAX_CAST]]

    return Movie(
        id=f"tvmaze-{payload.id}",
        title=payload.name,
        year=extract_year(payload.premiered),
        release_date=payload.premiered or None,
        runtime=payload.runtime or payload.average_runtime or None,
        genres=list(payload.genres),
        cast=cast,
        plot=strip_html_tags(payload.summary),
        poster=medium or original,
        backdrop=original or medium,
        ratings=ratings,
        external_ids=ExternalIds(
            tvmaze=str(payload.id),
            imdb=payload.externals.imdb if payload.externals else None,
        ),
        sources=["tvmaze"],
    )


def parse_payload(provider: str, raw: Dict[str, Any]) -> ProviderPayload:
    """Validate a raw provider dict into its tagged payload model.

    TVMaze search hits (``{"score": ..., "show": {...}}``) are unwrapped first.

    Raises:
        MalformedResponseError: If the provider is unknown or the payload is invalid.
    """
    model = _PAYLOAD_MODELS.get(provider)
    if model is None:
        raise MalformedResponseError(f"Unknown provider: {provider}")
    if provider == "tvmaze" and isinstance(raw, dict) and "show" in raw:
        raw = raw["show"]
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise MalformedResponseError(f"Invalid {provider} payload: {e}") from e


def normalize(
    provider: str, raw: Dict[str, Any], image_base_url: str = DEFAULT_IMAGE_BASE_URL
) -> Movie:
    """Normalize one raw record from ``provider`` into a ``Movie``.

    Args:
        provider: Provider tag (``tmdb``, ``omdb`` or ``tvmaze``).
        raw: Native JSON record.
        image_base_url: Prefix for TMDb image paths.

    Returns:
        Normalized movie.

    Raises:
        MalformedResponseError: If the record cannot be parsed.
    """
    payload = parse_payload(provider, raw)
    if isinstance(payload, TMDbMoviePayload):
        return normalize_tmdb(payload, image_base_url)
    if isinstance(payload, OMDbMoviePayload):
        return normalize_omdb(payload)
    return normalize_tvmaze(payload)


def _tmdb_rows(result: Any) -> List[Dict[str, Any]]:
    if isinstance(result, list):
        return result
    if isinstance(result, dict):
        if "results" in result:
            return list(result["results"] or [])
        if "id" in result:
            return [result]
    return []


def _omdb_rows(result: Any) -> List[Dict[str, Any]]:
    if isinstance(result, list):
        return result
    if isinstance(result, dict):
        if result.get("Response") == "False":
            return []
        if "Search" in result:
            return list(result["Search"] or [])
        if "results" in result:
            return list(result["results"] or [])
        if "imdbID" in result:
            return [result]
    return []


def _tvmaze_rows(result: Any) -> List[Dict[str, Any]]:
    if isinstance(result, list):
        return result
    if isinstance(result, dict):
        if "results" in result:
            return list(result["results"] or [])
        if "id" in result or "show" in result:
            return [result]
    return []


_ROW_EXTRACTORS: Dict[str, Callable[[Any], List[Dict[str, Any]]]] = {
    "tmdb": _tmdb_rows,
    "omdb": _omdb_rows,
    "tvmaze": _tvmaze_rows,
}


def normalize_result(
    provider: str, result: Any, image_base_url: str = DEFAULT_IMAGE_BASE_URL
) -> List[Movie]:
    """Normalize a whole native tool result (search page, list or single record).

    Rows that fail to parse are skipped and logged.

    Args:
        provider: Provider tag.
        result: Native tool result.
        image_base_url: Prefix for TMDb image paths.

    Returns:
        Normalized movies in upstream order.
    """
    extractor = _ROW_EXTRACTORS.get(provider)
    if extractor is None:
        logger.warning(f"No normalizer for provider '{provider}'")
        return []

    movies = []
    for row in extractor(result):
        try:
            movies.append(normalize(provider, row, image_base_url))
        except MalformedResponseError as e:
            logger.debug(f"Skipping {provider} row: {e}")
    return movies
