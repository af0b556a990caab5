"""Test normalization of TMDb, OMDb and TVMaze payloads."""

import pytest

from moviehub.core.services.result_normalizer import normalize, normalize_result
from moviehub.utils import MalformedResponseError

TMDB_DETAIL = {
    "id": 438631,
    "title": "Dune",
    "original_title": "Dune",
    "release_date": "2021-09-15",
    "overview": "Paul Atreides leads nomadic tribes.",
    "poster_path": "/d5NXSklXo0qyIYkgV94XAgMIckC.jpg",
    "backdrop_path": None,
    "vote_average": 7.8,
    "vote_count": 9000,
    "runtime": 155,
    "genres": [{"id": 878, "name": "Science Fiction"}, {"id": 12, "name": "Adventure"}],
    "imdb_id": "tt1160419",
    "credits": {
        "cast": [
            {"name": "Rebecca Ferguson", "order": 1},
            {"name": "Timothée Chalamet", "order": 0},
        ],
        "crew": [
            {"name": "Denis Villeneuve", "job": "Director"},
            {"name": "Hans Zimmer", "job": "Original Music Composer"},
        ],
    },
}

OMDB_DETAIL = {
    "Title": "Dune",
    "Year": "2021",
    "Released": "22 Oct 2021",
    "Runtime": "155 min",
    "Genre": "Action, Adventure, Drama",
    "Director": "Denis Villeneuve",
    "Actors": "Timothée Chalamet, Rebecca Ferguson, Zendaya",
    "Plot": "N/A",
    "Poster": "N/A",
    "Ratings": [
        {"Source": "Internet Movie Database", "Value": "8.0/10"},
        {"Source": "Rotten Tomatoes", "Value": "83%"},
        {"Source": "Metacritic", "Value": "74/100"},
    ],
    "Metascore": "74",
    "imdbRating": "8.0",
    "imdbVotes": "1,034,567",
    "imdbID": "tt1160419",
    "Type": "movie",
    "Response": "True",
}

TVMAZE_SHOW = {
    "id": 82,
    "name": "Game of Thrones",
    "genres": ["Drama", "Adventure", "Fantasy"],
    "premiered": "2011-04-17",
    "runtime": None,
    "averageRuntime": 61,
    "rating": {"average": 8.9},
    "image": {"medium": "https://static.tvmaze.com/m.jpg", "original": None},
    "summary": "<p>Based on the bestselling book series <b>A Song of Ice and Fire</b>.</p>",
    "externals": {"imdb": "tt0944947", "thetvdb": 121361},
}


def test_normalize_tmdb_detail():
    """Test the TMDb detail mapping including credits and images."""
    movie = normalize("tmdb", TMDB_DETAIL)

    assert movie.id == "tmdb-438631"
    assert movie.year == 2021
    assert movie.genres == ["Science Fiction", "Adventure"]
    assert movie.directors == ["Denis Villeneuve"]
    assert movie.cast == ["Timothée Chalamet", "Rebecca Ferguson"]
    assert movie.poster == "https://image.tmdb.org/t/p/w500/d5NXSklXo0qyIYkgV94XAgMIckC.jpg"
    assert movie.backdrop == movie.poster
    assert movie.external_ids.imdb == "tt1160419"
    assert movie.external_ids.tmdb == "438631"
    assert [(r.source, r.value, r.votes) for r in movie.ratings] == [("tmdb", 7.8, 9000)]
    assert movie.sources == ["tmdb"]


def test_normalize_tmdb_search_row_uses_genre_ids():
    """Test that search rows resolve genre ids and custom image hosts."""
    row = {
        "id": 1,
        "title": "Alien",
        "release_date": "",
        "genre_ids": [27, 878, 99999],
        "poster_path": "/a.jpg",
        "vote_average": 0,
        "vote_count": 0,
    }

    movie = normalize("tmdb", row, image_base_url="https://img.example/")

    assert movie.genres == ["Horror", "Science Fiction"]
    assert movie.year is None
    assert movie.release_date is None
    assert movie.poster == "https://img.example/a.jpg"
    assert movie.ratings == []


def test_normalize_omdb_detail():
    """Test OMDb parsing of display strings and third-party ratings."""
    movie = normalize("omdb", OMDB_DETAIL)

    assert movie.id == "omdb-tt1160419"
    assert movie.release_date == "2021-10-22"
    assert movie.runtime == 155
    assert movie.genres == ["Action", "Adventure", "Drama"]
    assert movie.cast == ["Timothée Chalamet", "Rebecca Ferguson", "Zendaya"]
    assert movie.plot is None
    assert movie.poster is None
    ratings = {r.source: (r.value, r.max_value, r.votes) for r in movie.ratings}
    assert ratings == {
        "imdb": (8.0, 10, 1034567),
        "rotten_tomatoes": (83, 100, None),
        "metacritic": (74, 100, None),
    }


def test_normalize_omdb_metascore_fallback():
    """Test that Metascore is used when the ratings list has no Metacritic entry."""
    record = dict(OMDB_DETAIL, Ratings=[], imdbRating="N/A", Metascore="61")

    movie = normalize("omdb", record)

    assert [(r.source, r.value) for r in movie.ratings] == [("metacritic", 61)]


def test_normalize_omdb_search_row():
    row = {"Title": "Heat", "Year": "1995", "imdbID": "tt0113277", "Type": "movie", "Poster": "N/A"}

    movie = normalize("omdb", row)

    assert movie.year == 1995
    assert movie.ratings == []
    assert movie.external_ids.imdb == "tt0113277"


def test_normalize_tvmaze_show():
    """Test TVMaze mapping with HTML stripping and runtime fallback."""
    movie = normalize("tvmaze", TVMAZE_SHOW)

    assert movie.id == "tvmaze-82"
    assert movie.title == "Game of Thrones"
    assert movie.year == 2011
    assert movie.runtime == 61
    assert movie.plot == "Based on the bestselling book series A Song of Ice and Fire."
    assert movie.poster == "https://static.tvmaze.com/m.jpg"
    assert movie.external_ids.imdb == "tt0944947"
    assert movie.external_ids.tvmaze == "82"
    assert [(r.source, r.value) for r in movie.ratings] == [("tvmaze", 8.9)]


def test_normalize_tvmaze_search_hit_is_unwrapped():
    movie = normalize("tvmaze", {"score": 0.9, "show": TVMAZE_SHOW})

    assert movie.id == "tvmaze-82"


def test_normalize_rejects_unknown_provider():
    with pytest.raises(MalformedResponseError):
        normalize("netflix", {"id": 1})


def test_normalize_rejects_invalid_payload():
    with pytest.raises(MalformedResponseError):
        normalize("tmdb", {"title": "No id"})


def test_normalize_result_skips_bad_rows():
    """Test that a malformed row is skipped while the rest of the page survives."""
    page = {"page": 1, "results": [{"id": 1, "title": "Alien"}, {"title": "broken"}]}

    movies = normalize_result("tmdb", page)

    assert [m.title for m in movies] == ["Alien"]


@pytest.mark.parametrize(
    "provider,result,count",
    [
        ("tmdb", TMDB_DETAIL, 1),
        ("tmdb", [TMDB_DETAIL], 1),
        ("omdb", {"Search": [OMDB_DETAIL, OMDB_DETAIL]}, 2),
        ("omdb", {"Response": "False", "Error": "Movie not found!"}, 0),
        ("omdb", OMDB_DETAIL, 1),
        ("tvmaze", [{"score": 1, "show": TVMAZE_SHOW}], 1),
        ("tvmaze", None, 0),
        ("unknown", [TMDB_DETAIL], 0),
    ],
)
def test_normalize_result_shapes(provider, result, count):
    """Test the accepted native result shapes."""
    assert len(normalize_result(provider, result)) == count
