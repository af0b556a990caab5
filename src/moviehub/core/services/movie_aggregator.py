"""Movie aggregation: merge, deduplicate, weighted rating and sorting.

Every operation here is a pure function of its inputs. Nothing is cached between calls
and input records are never mutated.
"""

import math
from typing import Dict, List, Optional, Sequence

from ...infrastructure.logging import LoggerMixin
from ...utils import EmptyInputError, collation_key, contains_word, find_year_token
from ..models import AggregatedRating, Movie, Rating

SOURCE_WEIGHTS: Dict[str, float] = {
    "imdb": 0.4,
    "tmdb": 0.3,
    "rotten_tomatoes": 0.2,
    "metacritic": 0.1,
}
DEFAULT_WEIGHT = 0.1

SORT_MODES = (
    "relevance",
    "year_desc",
    "year_asc",
    "title_az",
    "title_za",
    "votes_desc",
    "votes_asc",
)

_FILL_IF_EMPTY = ("plot", "poster", "backdrop", "runtime", "release_date")
_UNION_LISTS = ("genres", "directors", "cast")


def _round_half_up(value: float) -> float:
    """Round to one decimal, halves away from zero."""
    return math.copysign(math.floor(abs(value) * 10 + 0.5) / 10, value)


def _union(target: List[str], items: Sequence[str]) -> None:
    for item in items:
        if item and item not in target:
            target.append(item)


def _has_more_votes(candidate: Rating, current: Rating) -> bool:
    if candidate.votes is None:
        return False
    if current.votes is None:
        return True
    return candidate.votes > current.votes


class MovieAggregator(LoggerMixin):
    """Combines per-source movie records into canonical ones."""

    def merge_movies(self, movies: Sequence[Movie]) -> Movie:
        """Merge records describing the same title into one.

        The first record is the base. Ratings from every record are collected and then
        reduced to one per source, keeping the one with the most votes. External ids are
        overlaid in order so later records win per key. Scalar fields are filled from the
        first record that has them. Genre, director and cast lists are unioned in
        first-seen order.

        Args:
            movies: Records to merge, in precedence order.

        Returns:
            Merged movie.

        Raises:
            EmptyInputError: If ``movies`` is empty.
        """
        if not movies:
            raise EmptyInputError("Cannot merge an empty list of movies")
        if len(movies) == 1:
            return movies[0]

        base = movies[0]
        merged = base.model_copy(deep=True)
        all_ratings: List[Rating] = []
        sources: List[str] = []
        external_ids = base.external_ids.model_copy()
        for field in _UNION_LISTS:
            setattr(merged, field, [])

        for movie in movies:
            all_ratings.extend(movie.ratings)
            _union(sources, movie.sources)
            external_ids = external_ids.merged_with(movie.external_ids)

            for field in _FILL_IF_EMPTY:
                if not getattr(merged, field) and getattr(movie, field):
                    setattr(merged, field, getattr(movie, field))

            for field in _UNION_LISTS:
                _union(getattr(merged, field), getattr(movie, field))

        merged.ratings = self._dedupe_ratings(all_ratings)
        merged.sources = sources
        merged.external_ids = external_ids
        merged.aggregated_rating = None
        return merged

    def _dedupe_ratings(self, ratings: Sequence[Rating]) -> List[Rating]:
        by_source: Dict[str, Rating] = {}
        for rating in ratings:
            current = by_source.get(rating.source)
            if current is None or _has_more_votes(rating, current):
                by_source[rating.source] = rating.model_copy()
        return list(by_source.values())

    def calculate_weighted_rating(self, movie: Movie) -> AggregatedRating:
        """Compute the cross-source weighted rating of a movie.

        Each rating is normalized to 0-10 and weighted by its source; the weighted sum is
        divided by the sum of the weights actually used.

        Args:
            movie: Movie to score.

        Returns:
            Score rounded to one decimal plus the per-source normalized values.
        """
        if not movie.ratings:
            return AggregatedRating(score=0.0, breakdown={})

        total = 0.0
        total_weight = 0.0
        breakdown: Dict[str, float] = {}

        for rating in movie.ratings:
            weight = SOURCE_WEIGHTS.get(rating.source, DEFAULT_WEIGHT)
            normalized = rating.normalized()
            total += normalized * weight
            total_weight += weight
            breakdown[rating.source] = normalized

        score = total / total_weight if total_weight > 0 else 0.0
        return AggregatedRating(score=_round_half_up(score), breakdown=breakdown)

    def deduplicate_movies(self, movies: Sequence[Movie]) -> List[Movie]:
        """Group records by lowercase title and year, merging each group.

        Groups come out in the order their key was first seen. A group that fails to
        merge is logged and left out; the remaining groups are still returned.

        Args:
            movies: Records from any number of providers.

        Returns:
            One merged record per group.
        """
        groups: Dict[str, List[Movie]] = {}
        for movie in movies:
            groups.setdefault(self.dedupe_key(movie), []).append(movie)

        results: List[Movie] = []
        for key, group in groups.items():
            try:
                results.append(self.merge_movies(group))
            except Exception as e:
                self.logger.error(f"Failed to merge group '{key}' ({len(group)} records): {e}")
        return results

    @staticmethod
    def dedupe_key(movie: Movie) -> str:
        """Grouping key for ``deduplicate_movies``."""
        year = movie.year if movie.year is not None else "unknown"
        return f"{movie.title.lower()}-{year}"

    def sort_movies(
        self, movies: Sequence[Movie], mode: str = "relevance", search_query: Optional[str] = None
    ) -> List[Movie]:
        """Return a sorted copy of ``movies``.

        Unknown modes sort by relevance. Relevance without a query sorts by weighted score
        and then by total votes.

        Args:
            movies: Movies to sort. Not modified.
            mode: One of ``SORT_MODES``.
            search_query: Query used by the relevance scorer.

        Returns:
            New sorted list.
        """
        items = list(movies)

        if mode == "year_desc":
            return sorted(items, key=lambda m: m.year or 0, reverse=True)
        if mode == "year_asc":
            return sorted(items, key=lambda m: m.year or 0)
        if mode == "title_az":
            return sorted(items, key=lambda m: (collation_key(m.title), m.title))
        if mode == "title_za":
            return sorted(items, key=lambda m: (collation_key(m.title), m.title), reverse=True)
        if mode == "votes_desc":
            return sorted(items, key=lambda m: m.total_votes(), reverse=True)
        if mode == "votes_asc":
            return sorted(items, key=lambda m: m.total_votes())

        if search_query:
            query = search_query.lower()
            return sorted(
                items,
                key=lambda m: (
                    -self.calculate_relevance_score(m, query),
                    -self.calculate_weighted_rating(m).score,
                ),
            )
        return self.sort_by_rating(items)

    def sort_by_rating(self, movies: Sequence[Movie]) -> List[Movie]:
        """Sort by weighted score, then total votes, both descending."""
        return sorted(
            movies,
            key=lambda m: (-self.calculate_weighted_rating(m).score, -m.total_votes()),
        )

    def calculate_relevance_score(self, movie: Movie, query: str) -> int:
        """Score how well a movie matches a lowercase query.

        Title and original title each award points for the best of exact, prefix or
        substring match. A title that appears as a whole word inside the query, as in
        ``dune 2021``, counts as a substring match. Year, genre, director and cast
        matches add further points.

        Args:
            movie: Candidate movie.
            query: Lowercased search query.

        Returns:
            Additive relevance score.
        """
        score = 0
        title = movie.title.lower()

        if title == query:
            score += 100
        elif title.startswith(query):
            score += 80
        elif query in title or contains_word(query, title):
            score += 60

        if movie.original_title:
            original = movie.original_title.lower()
            if original == query:
                score += 90
            elif original.startswith(query):
                score += 70
            elif query in original:
                score += 50

        query_year = find_year_token(query)
        if query_year is not None and movie.year is not None:
            if movie.year == query_year:
                score += 40
            elif abs(movie.year - query_year) <= 2:
                score += 20

        genres = [genre.lower() for genre in movie.genres if genre]
        if any(genre in query or query in genre for genre in genres):
            score += 30

        if any(query in director.lower() for director in movie.directors):
            score += 25

        if any(query in actor.lower() for actor in movie.cast):
            score += 20

        return score

    def with_rating(self, movie: Movie) -> Movie:
        """Return a copy of ``movie`` with a freshly computed aggregated rating."""
        return movie.model_copy(update={"aggregated_rating": self.calculate_weighted_rating(movie)})
