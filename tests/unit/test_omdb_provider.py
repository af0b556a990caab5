"""Test OMDb search enrichment."""

from unittest.mock import AsyncMock, patch

import pytest

from moviehub.config import OMDbConfig, RetryConfig
from moviehub.core.services import OMDbProvider
from moviehub.infrastructure import RetryPolicy
from moviehub.utils import ProviderError

SEARCH_PAGE = {
    "Search": [
        {"Title": "Heat", "Year": "1995", "imdbID": "tt0113277", "Type": "movie"},
        {"Title": "Heat", "Year": "1986", "imdbID": "tt0093164", "Type": "movie"},
        {"Title": "Heat Wave", "Year": "1990", "imdbID": "tt0099753", "Type": "movie"},
    ],
    "totalResults": "3",
    "Response": "True",
}


@pytest.fixture
def provider():
    return OMDbProvider(OMDbConfig(api_key="test-omdb-key"), RetryPolicy(RetryConfig()))


@pytest.mark.asyncio
async def test_search_skips_malformed_detail_rows(provider):
    """Test that one unparseable detail record drops only that row."""
    details = {
        "tt0113277": {
            "Title": "Heat",
            "Year": "1995",
            "imdbID": "tt0113277",
            "imdbRating": "8.3",
            "imdbVotes": "700,000",
        },
        "tt0093164": {"Title": {"bad": "shape"}, "imdbID": "tt0093164"},
        "tt0099753": {"Title": "Heat Wave", "Year": "1990", "imdbID": "tt0099753"},
    }

    async def fake_details(imdb_id, plot="short"):
        return details[imdb_id]

    with patch.object(provider, "search_raw", AsyncMock(return_value=SEARCH_PAGE)), patch.object(
        provider, "details_raw", side_effect=fake_details
    ):
        response = await provider.search("Heat")

    assert response.success is True
    assert [movie.id for movie in response.data] == ["omdb-tt0113277", "omdb-tt0099753"]
    assert response.data[0].ratings[0].source == "imdb"


@pytest.mark.asyncio
async def test_search_falls_back_to_row_when_detail_fails(provider):
    """Test that a failed detail call keeps the bare search row."""
    page = {"Search": SEARCH_PAGE["Search"][:1], "Response": "True"}
    failing = AsyncMock(side_effect=ProviderError("OMDb error: busy", "omdb", 503))

    with patch.object(provider, "search_raw", AsyncMock(return_value=page)), patch.object(
        provider, "details_raw", failing
    ):
        response = await provider.search("Heat")

    assert response.success is True
    assert response.data[0].title == "Heat"
    assert response.data[0].ratings == []
