"""Native payload shapes of the upstream providers.

Each provider gets its own tagged model so that normalization into ``Movie`` is typed
end to end. Only the fields the normalizers read are declared; everything else the
upstream sends is ignored.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TMDbGenre(_Payload):
    id: int
    name: str


class TMDbCastMember(_Payload):
    name: str
    order: Optional[int] = None


class TMDbCrewMember(_Payload):
    name: str
    job: Optional[str] = None


class TMDbCredits(_Payload):
    cast: List[TMDbCastMember] = Field(default_factory=list)
    crew: List[TMDbCrewMember] = Field(default_factory=list)


class TMDbExternalIds(_Payload):
    imdb_id: Optional[str] = None


class TMDbMoviePayload(_Payload):
    """TMDb ``/movie`` detail or search row."""

    provider: Literal["tmdb"] = "tmdb"
    id: int
    title: Optional[str] = None
    name: Optional[str] = None
    original_title: Optional[str] = None
    release_date: Optional[str] = None
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    vote_average: Optional[float] = None
    vote_count: Optional[int] = None
    runtime: Optional[int] = None
    genre_ids: List[int] = Field(default_factory=list)
    genres: List[TMDbGenre] = Field(default_factory=list)
    imdb_id: Optional[str] = None
    external_ids: Optional[TMDbExternalIds] = None
    credits: Optional[TMDbCredits] = None


class OMDbRatingEntry(_Payload):
    source: str = Field(..., alias="Source")
    value: str = Field(..., alias="Value")


class OMDbMoviePayload(_Payload):
    """OMDb search row or ``?i=`` detail record."""

    provider: Literal["omdb"] = "omdb"
    title: str = Field(..., alias="Title")
    year: Optional[str] = Field(None, alias="Year")
    imdb_id: str = Field(..., alias="imdbID")
    type: Optional[str] = Field(None, alias="Type")
    poster: Optional[str] = Field(None, alias="Poster")
    released: Optional[str] = Field(None, alias="Released")
    runtime: Optional[str] = Field(None, alias="Runtime")
    genre: Optional[str] = Field(None, alias="Genre")
    director: Optional[str] = Field(None, alias="Director")
    actors: Optional[str] = Field(None, alias="Actors")
    plot: Optional[str] = Field(None, alias="Plot")
    imdb_rating: Optional[str] = Field(None, alias="imdbRating")
    imdb_votes: Optional[str] = Field(None, alias="imdbVotes")
    metascore: Optional[str] = Field(None, alias="Metascore")
    ratings: List[OMDbRatingEntry] = Field(default_factory=list, alias="Ratings")


class TVMazeImage(_Payload):
    medium: Optional[str] = None
    original: Optional[str] = None


class TVMazeRating(_Payload):
    average: Optional[float] = None


class TVMazeExternals(_Payload):
    imdb: Optional[str] = None
    thetvdb: Optional[int] = None
    tvrage: Optional[int] = None


class TVMazePerson(_Payload):
    name: str


class TVMazeCastCredit(_Payload):
    person: TVMazePerson


class TVMazeEmbedded(_Payload):
    cast: List[TVMazeCastCredit] = Field(default_factory=list)


class TVMazeShowPayload(_Payload):
    """TVMaze ``/shows`` record."""

    provider: Literal["tvmaze"] = "tvmaze"
    id: int
    name: str
    language: Optional[str] = None
    genres: List[str] = Field(default_factory=list)
    premiered: Optional[str] = None
    runtime: Optional[int] = None
    average_runtime: Optional[int] = Field(None, alias="averageRuntime")
    rating: Optional[TVMazeRating] = None
    image: Optional[TVMazeImage] = None
    summary: Optional[str] = None
    externals: Optional[TVMazeExternals] = None
    embedded: Optional[TVMazeEmbedded] = Field(None, alias="_embedded")


ProviderPayload = Union[TMDbMoviePayload, OMDbMoviePayload, TVMazeShowPayload]
