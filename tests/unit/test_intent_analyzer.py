"""Test intent classification, strategy selection and query helpers."""

import pytest

from moviehub.core.models import ExtractedEntities, Intent
from moviehub.core.models.intent import SuggestedStrategy
from moviehub.core.services import (
    DirectorNameExtractor,
    RuleBasedIntentClassifier,
    SearchStrategySelector,
)
from moviehub.core.services.intent_analyzer import (
    extract_compare_titles,
    extract_detail_subject,
    genre_from_text,
)


@pytest.fixture
def classifier():
    return RuleBasedIntentClassifier()


@pytest.fixture
def selector():
    return SearchStrategySelector()


@pytest.mark.parametrize(
    "query,expected,confidence",
    [
        ("Tell me details about Inception", "get_movie_details", 0.9),
        ("盗梦空间的详情", "get_movie_details", 0.9),
        ("compare Dune and Inception", "compare_movies", 0.8),
        ("对比盗梦空间和星际穿越", "compare_movies", 0.8),
        ("recommend something like Alien", "recommend_movies", 0.8),
        ("推荐一些科幻电影", "recommend_movies", 0.8),
        ("compare Dune", "search_movies", 0.7),
        ("The Matrix", "search_movies", 0.7),
        ("", "search_movies", 0.7),
    ],
)
def test_rule_based_classification(classifier, query, expected, confidence):
    """Test keyword rules and the search fallback."""
    intent = classifier.classify_sync(query)

    assert intent.type == expected
    assert intent.confidence == confidence


@pytest.mark.asyncio
async def test_rule_based_classify_is_async_compatible(classifier):
    """Test the awaitable entry point."""
    intent = await classifier.classify("details of Heat")

    assert intent.type == "get_movie_details"
    assert classifier.name == "rule_based_classifier"


@pytest.mark.parametrize(
    "query,name",
    [
        ("movies directed by Christopher Nolan", "Christopher Nolan"),
        ("克里斯托弗·诺兰导演的电影", "克里斯托弗·诺兰"),
        ("Christopher Nolan director", "Christopher Nolan"),
        ("films by director Denis Villeneuve", "Denis Villeneuve"),
        ("show me director Christopher Nolan", "Christopher Nolan"),
        ("find director Nolan films", "Nolan"),
        ("I want films from director Nolan", "Nolan"),
        ("Christopher Nolan director movies", "Christopher Nolan"),
    ],
)
def test_director_extraction(query, name):
    """Test director name patterns."""
    assert DirectorNameExtractor().extract(query) == name


def test_director_extraction_without_name():
    """Test that a bare keyword yields no name."""
    assert DirectorNameExtractor().extract("director") is None
    assert DirectorNameExtractor().extract("show me films by director") is None


def test_rule_based_director_strategy(selector):
    plan = selector.select("movies directed by Christopher Nolan")

    assert plan.type == "director_search"
    assert plan.director_name == "Christopher Nolan"


def test_director_keyword_without_name_falls_through(selector):
    """Test that an unresolvable director query becomes a direct search."""
    plan = selector.select("director")

    assert plan.type == "direct_search"
    assert plan.query == "director"


@pytest.mark.parametrize(
    "query,genre_id,keyword",
    [
        ("推荐一些科幻电影", 878, "sci-fi"),
        ("best horror films", 27, "horror"),
        ("a romantic comedy", 35, "comedy"),
    ],
)
def test_rule_based_genre_strategy(selector, query, genre_id, keyword):
    plan = selector.select(query)

    assert plan.type == "genre_search"
    assert plan.genre_id == genre_id
    assert plan.keyword == keyword


def test_rule_based_popular_strategy(selector):
    plan = selector.select("what is trending this week")

    assert plan.type == "popular_search"
    assert plan.category == "popular"


def test_rule_based_direct_strategy(selector):
    plan = selector.select("The Matrix")

    assert plan.type == "direct_search"
    assert plan.query == "The Matrix"


def test_suggested_genre_strategy_uses_genre_table(selector):
    """Test that a classifier-suggested genre is mapped through the same table."""
    intent = Intent(
        type="search_movies",
        confidence=0.9,
        extracted_entities=ExtractedEntities(genres=["Science Fiction"]),
        search_strategy=SuggestedStrategy(type="genre_search"),
    )

    plan = selector.select("space movies", intent)

    assert plan.type == "genre_search"
    assert plan.genre_id == 878


def test_suggested_strategy_without_entities_is_direct(selector):
    """Test that a suggestion missing its entities degrades to a direct search."""
    intent = Intent(
        type="search_movies",
        confidence=0.9,
        search_strategy=SuggestedStrategy(type="director_search"),
    )

    plan = selector.select("Nolan", intent)

    assert plan.type == "direct_search"
    assert plan.query == "Nolan"


def test_suggested_director_strategy(selector):
    intent = Intent(
        type="search_movies",
        confidence=0.9,
        extracted_entities=ExtractedEntities(directors=["Greta Gerwig"]),
        search_strategy=SuggestedStrategy(type="director_search"),
    )

    assert selector.select("Gerwig films", intent).director_name == "Greta Gerwig"


def test_intent_without_suggestion_uses_rules(selector):
    intent = Intent(type="search_movies", confidence=0.5)

    assert selector.select("popular movies", intent).type == "popular_search"


def test_genre_from_text_first_hit_wins():
    assert genre_from_text("Sci-Fi action") == (878, "sci-fi")
    assert genre_from_text("nothing here") is None


@pytest.mark.parametrize(
    "query,titles",
    [
        ("compare Dune vs Inception", ["Dune", "Inception"]),
        ("compare the movies Heat and Ronin", ["Heat", "Ronin"]),
        ("对比盗梦空间和星际穿越", ["盗梦空间", "星际穿越"]),
        ("compare Dune", []),
        ("", []),
    ],
)
def test_extract_compare_titles(query, titles):
    assert extract_compare_titles(query) == titles


@pytest.mark.parametrize(
    "query,subject",
    [
        ("Tell me details about Inception", "Inception"),
        ("information about the movie Heat", "Heat"),
        ("盗梦空间的详情", "盗梦空间"),
        ("details", "details"),
    ],
)
def test_extract_detail_subject(query, subject):
    assert extract_detail_subject(query) == subject
