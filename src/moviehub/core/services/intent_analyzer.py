"""Intent classification and search strategy selection."""

import re
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from ...infrastructure.logging import LoggerMixin
from ..interfaces import IIntentClassifier, ILLMService
from ..models import ExtractedEntities, Intent, SearchPlan

# Keyword -> TMDb genre id. Scanned in order, first hit wins.
GENRE_TABLE: Dict[str, int] = {
    "科幻电影": 878,
    "科幻": 878,
    "science fiction": 878,
    "sci-fi": 878,
    "scifi": 878,
    "动作片": 28,
    "动作": 28,
    "action": 28,
    "喜剧片": 35,
    "喜剧": 35,
    "comedy": 35,
    "恐怖片": 27,
    "恐怖": 27,
    "horror": 27,
    "爱情片": 10749,
    "爱情": 10749,
    "romance": 10749,
    "剧情片": 18,
    "剧情": 18,
    "drama": 18,
    "惊悚片": 53,
    "惊悚": 53,
    "thriller": 53,
    "冒险片": 12,
    "冒险": 12,
    "adventure": 12,
    "动画片": 16,
    "动画": 16,
    "animation": 16,
    "犯罪片": 80,
    "犯罪": 80,
    "crime": 80,
    "悬疑片": 9648,
    "悬疑": 9648,
    "mystery": 9648,
}

# TMDb genre id -> keyword used where a provider only supports text search.
GENRE_SEARCH_KEYWORDS: Dict[int, str] = {
    878: "sci-fi",
    28: "action",
    35: "comedy",
    27: "horror",
    10749: "romance",
    18: "drama",
    53: "thriller",
    12: "adventure",
    16: "animation",
    80: "crime",
    9648: "mystery",
}

DETAIL_KEYWORDS = ("详情", "details", "信息", "information about")
COMPARE_KEYWORDS = ("对比", "比较", "compare")
COMPARE_JOINERS = ("和", "与", "vs", "versus", " and ")
RECOMMEND_KEYWORDS = ("推荐", "recommend", "类似", "similar")
POPULAR_KEYWORDS = ("热门", "popular", "trending", "推荐", "recommend", "经典", "classic")
DIRECTOR_KEYWORDS = ("导演", "执导", "director", "directed by")

DEFAULT_DIRECTOR_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"(.+?)导演的电影"),
    re.compile(r"(.+?)执导的电影"),
    re.compile(r"directed by\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:movies|films)\s+by\s+(?:director\s+)?(.+)", re.IGNORECASE),
    re.compile(r"director\s+(.+)", re.IGNORECASE),
    re.compile(r"(.+?)\s*director", re.IGNORECASE),
    re.compile(r"(.+?)执导"),
    re.compile(r"(.+?)导演"),
)

_LEADING_FILLER = re.compile(r"^(?:show me|find|list|search for|search|get|all)\s+", re.IGNORECASE)
_TRAILING_FILLER = re.compile(r"(?:'s)?\s*(?:movies|films)?[\s?.!,]*$", re.IGNORECASE)
_FILLER_WORDS = frozenset(
    "show me find list search for get all i want see watch some the a from by of"
    " movie movies film films director".split()
)
_COMPARE_PREFIX = re.compile(
    r"^\s*(?:please\s+)?(?:compare|对比|比较)\s*(?:the\s+)?(?:movies?|films?)?\s*:?\s*",
    re.IGNORECASE,
)
_COMPARE_SPLIT = re.compile(r"\s+(?:vs\.?|versus|and|with)\s+|和|与|,", re.IGNORECASE)


class RuleBasedIntentClassifier(IIntentClassifier):
    """Keyword classifier. Always answers, never raises."""

    name = "rule_based_classifier"

    async def classify(self, query: str, context: str = "movie_search") -> Intent:
        return self.classify_sync(query)

    def classify_sync(self, query: str) -> Intent:
        """Classify without awaiting anything.

        Args:
            query: User query, may be empty.

        Returns:
            Intent; ``search_movies`` with confidence 0.7 when no rule matches.
        """
        text = (query or "").lower()

        if any(keyword in text for keyword in DETAIL_KEYWORDS):
            return Intent(type="get_movie_details", confidence=0.9)

        if any(keyword in text for keyword in COMPARE_KEYWORDS) and any(
            joiner in text for joiner in COMPARE_JOINERS
        ):
            return Intent(type="compare_movies", confidence=0.8)

        if any(keyword in text for keyword in RECOMMEND_KEYWORDS):
            return Intent(type="recommend_movies", confidence=0.8)

        return Intent(type="search_movies", confidence=0.7)


class LLMIntentClassifier(IIntentClassifier):
    """Classifier delegating to an LLM service. Errors propagate to the caller."""

    name = "llm_service"

    def __init__(self, llm_service: ILLMService) -> None:
        self._llm_service = llm_service

    async def classify(self, query: str, context: str = "movie_search") -> Intent:
        return await self._llm_service.analyze_intent(query, context)


def _only_filler(name: str) -> bool:
    return all(word in _FILLER_WORDS for word in name.lower().split())


class DirectorNameExtractor:
    """Pulls a director's name out of a query with an ordered list of patterns."""

    def __init__(self, patterns: Sequence[Pattern[str]] = DEFAULT_DIRECTOR_PATTERNS) -> None:
        self._patterns = tuple(patterns)

    def extract(self, query: str) -> Optional[str]:
        """Return the first pattern's capture, cleaned of filler words, or None."""
        for pattern in self._patterns:
            match = pattern.search(query)
            if not match:
                continue
            name = _LEADING_FILLER.sub("", match.group(1).strip())
            name = _TRAILING_FILLER.sub("", name).strip()
            if name and not _only_filler(name):
                return name
        return None


def genre_from_text(text: str) -> Optional[Tuple[int, str]]:
    """Find the first genre keyword contained in ``text``.

    Returns:
        ``(tmdb_genre_id, search_keyword)`` or None.
    """
    lowered = text.lower()
    for keyword, genre_id in GENRE_TABLE.items():
        if keyword in lowered:
            return genre_id, GENRE_SEARCH_KEYWORDS.get(genre_id, keyword)
    return None


def genre_from_names(names: Sequence[str]) -> Optional[Tuple[int, str]]:
    """Map classifier-extracted genre names through the genre table."""
    for name in names:
        genre_id = GENRE_TABLE.get(name.strip().lower())
        if genre_id:
            return genre_id, GENRE_SEARCH_KEYWORDS.get(genre_id, name)
    return None


def extract_compare_titles(query: str) -> List[str]:
    """Best-effort extraction of the two titles in a comparison query.

    Args:
        query: Query such as ``compare Dune vs Inception``.

    Returns:
        Exactly two titles, or an empty list when the heuristics fail.
    """
    body = _COMPARE_PREFIX.sub("", query or "")
    parts = [part.strip(" ?.!:\"'") for part in _COMPARE_SPLIT.split(body)]
    titles = [part for part in parts if part]
    return titles[:2] if len(titles) >= 2 else []


class SearchStrategySelector(LoggerMixin):
    """Chooses direct, genre, popular or director search for a query.

    The classifier's suggestion is used when present; otherwise keyword rules decide.
    Both paths share the same genre table.
    """

    def __init__(self, director_extractor: Optional[DirectorNameExtractor] = None) -> None:
        self._director_extractor = director_extractor or DirectorNameExtractor()

    def select(self, query: str, intent: Optional[Intent] = None) -> SearchPlan:
        """Pick the search plan for a query.

        Args:
            query: User query.
            intent: Intent with an optional suggested strategy.

        Returns:
            Search plan.
        """
        if intent is not None and intent.search_strategy is not None:
            return self._from_suggestion(query, intent)
        return self.rule_based(query)

    def _from_suggestion(self, query: str, intent: Intent) -> SearchPlan:
        suggestion = intent.search_strategy
        entities = intent.extracted_entities or ExtractedEntities()

        if suggestion.type == "genre_search":
            genre = genre_from_names(entities.genres)
            if genre:
                return SearchPlan(type="genre_search", genre_id=genre[0], keyword=genre[1])

        if suggestion.type == "popular_search":
            return SearchPlan(type="popular_search", category="popular")

        if suggestion.type == "director_search" and entities.directors:
            return SearchPlan(type="director_search", director_name=entities.directors[0])

        return SearchPlan(type="direct_search", query=query)

    def rule_based(self, query: str) -> SearchPlan:
        """Keyword-only strategy selection."""
        text = (query or "").lower()

        if any(keyword in text for keyword in DIRECTOR_KEYWORDS):
            name = self._director_extractor.extract(query)
            if name:
                return SearchPlan(type="director_search", director_name=name)
            self.logger.debug(f"Director keyword without a name in '{query}'")

        genre = genre_from_text(text)
        if genre:
            return SearchPlan(type="genre_search", genre_id=genre[0], keyword=genre[1])

        if any(keyword in text for keyword in POPULAR_KEYWORDS):
            return SearchPlan(type="popular_search", category="popular")

        return SearchPlan(type="direct_search", query=query)


_DETAIL_FILLER = re.compile(
    r"\b(?:show|give|get|tell)\s+me\b"
    r"|\b(?:more\s+)?(?:details|detail|information|info)\s+(?:of|on|about|for)\b"
    r"|\b(?:details|detail|information|info)\b"
    r"|\b(?:the\s+)?(?:movie|film)\b"
    r"|的详情|详情|的信息|信息",
    re.IGNORECASE,
)


def extract_detail_subject(query: str) -> str:
    """Strip detail-request filler from a query, keeping the title being asked about.

    Falls back to the original query when nothing is left.
    """
    subject = _DETAIL_FILLER.sub(" ", query or "")
    subject = re.sub(r"\s+", " ", subject).strip(" ?.!:,\"'")
    return subject or (query or "").strip()
