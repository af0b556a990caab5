"""Intent-driven workflow orchestrator."""

import asyncio
import time
from typing import Any, Dict, List, Optional, Tuple

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import MovieNotFoundError, OrchestratorError, settle_all
from ..interfaces import IIntentClassifier, IToolGateway, IWorkflowOrchestrator
from ..models import ExecutionStep, Intent, Movie, SearchPlan, WorkflowResult
from .intent_analyzer import (
    RuleBasedIntentClassifier,
    SearchStrategySelector,
    extract_compare_titles,
    extract_detail_subject,
)
from .movie_aggregator import MovieAggregator
from .result_normalizer import normalize, normalize_result

SearchBag = Dict[str, Optional[Any]]


def _elapsed_ms(started: float) -> int:
    return max(0, int((time.monotonic() - started) * 1000))


def _error_text(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


class ExecutionTrace:
    """Append-only list of ``ExecutionStep`` records for one execution."""

    def __init__(self) -> None:
        self._steps: List[ExecutionStep] = []

    def record(
        self,
        step: str,
        tool: str,
        started: float,
        input: Any = None,
        output: Any = None,
        success: bool = True,
        error: Optional[str] = None,
    ) -> None:
        self._steps.append(
            ExecutionStep(
                step=step,
                tool=tool,
                input=input,
                output=output,
                duration=_elapsed_ms(started),
                success=success,
                error=error,
            )
        )

    @property
    def steps(self) -> List[ExecutionStep]:
        return list(self._steps)


class WorkflowOrchestrator(IWorkflowOrchestrator, LoggerMixin):
    """Runs one of four sub-workflows for a natural language query.

    Flow per call:
        intent = LLM classifier, or the rule-based classifier if that fails
        branch on intent: search, details, compare or recommend
        each branch issues ``server.tool`` calls through the gateway
        raw tool results are normalized, deduplicated and rated

    Every step is written to an execution trace that is returned with the result.
    Failures inside a branch are traced and re-raised; ``execute`` turns them into a
    ``success=False`` result instead of raising.
    """

    def __init__(
        self,
        config: Config,
        gateway: IToolGateway,
        aggregator: Optional[MovieAggregator] = None,
        llm_classifier: Optional[IIntentClassifier] = None,
        fallback_classifier: Optional[RuleBasedIntentClassifier] = None,
        strategy_selector: Optional[SearchStrategySelector] = None,
    ) -> None:
        """Initialize workflow orchestrator.

        Args:
            config: Application configuration.
            gateway: Tool gateway used for every provider call.
            aggregator: Movie aggregator.
            llm_classifier: Optional LLM-backed intent classifier.
            fallback_classifier: Rule-based classifier used when the LLM is unavailable.
            strategy_selector: Search strategy selector.
        """
        self._config = config
        self._gateway = gateway
        self._aggregator = aggregator or MovieAggregator()
        self._llm_classifier = llm_classifier
        self._fallback = fallback_classifier or RuleBasedIntentClassifier()
        self._strategy = strategy_selector or SearchStrategySelector()
        self._image_base_url = config.tmdb.image_base_url

    async def execute(self, query: str, user_id: Optional[str] = None) -> WorkflowResult:
        started = time.monotonic()
        trace = ExecutionTrace()
        intent: Optional[Intent] = None

        try:
            if not query or not query.strip():
                raise OrchestratorError("Query must not be empty")

            intent = await self._analyze_intent(query, trace)

            if intent.type == "get_movie_details":
                result = await self._details_workflow(query, intent, trace)
            elif intent.type == "compare_movies":
                result = await self._compare_workflow(query, intent, trace)
            elif intent.type == "recommend_movies":
                result = await self._recommend_workflow(query, user_id, trace)
            else:
                result = await self._search_workflow(query, intent, trace)

            self.logger.info(
                f"Workflow '{intent.type}' for '{query}' finished in {_elapsed_ms(started)}ms"
            )
            return WorkflowResult(
                query=query,
                intent=intent,
                result=result,
                execution_trace=trace.steps,
                total_duration=_elapsed_ms(started),
                success=True,
            )
        except Exception as e:
            self.logger.error(f"Workflow execution failed for '{query}': {e}")
            return WorkflowResult(
                query=query or "",
                intent=intent,
                execution_trace=trace.steps,
                total_duration=_elapsed_ms(started),
                success=False,
                error=_error_text(e),
            )

    async def _analyze_intent(self, query: str, trace: ExecutionTrace) -> Intent:
        """Classify once: LLM first, rule-based fallback on any failure."""
        started = time.monotonic()

        if self._llm_classifier is not None:
            try:
                intent = await asyncio.wait_for(
                    self._llm_classifier.classify(query, "movie_search"),
                    timeout=self._config.workflow.intent_timeout,
                )
                trace.record(
                    "analyze_intent",
                    self._llm_classifier.name,
                    started,
                    {"query": query},
                    intent.to_dict(),
                )
                return intent
            except Exception as e:
                self.logger.warning(f"LLM intent analysis failed, using rules: {_error_text(e)}")
                trace.record(
                    "analyze_intent",
                    self._llm_classifier.name,
                    started,
                    {"query": query},
                    success=False,
                    error=_error_text(e),
                )

        intent = await self._fallback.classify(query)
        trace.record(
            "analyze_intent", self._fallback.name, started, {"query": query}, intent.to_dict()
        )
        return intent

    async def _call(self, qualified_name: str, args: Dict[str, Any]) -> Any:
        return await asyncio.wait_for(
            self._gateway.call_tool(qualified_name, args),
            timeout=self._config.workflow.tool_timeout,
        )

    async def _fan_out(self, calls: List[Tuple[str, str, Dict[str, Any]]]) -> SearchBag:
        """Call one tool per provider concurrently; failures become None."""
        outcomes = await settle_all(
            [self._gateway.call_tool(tool, args) for _, tool, args in calls],
            timeout=self._config.workflow.tool_timeout,
        )
        bag: SearchBag = {}
        for (provider, tool, _), outcome in zip(calls, outcomes):
            if not outcome.ok:
                self.logger.warning(f"{tool} failed: {_error_text(outcome.error)}")
            bag[provider] = outcome.value if outcome.ok else None
        return bag

    async def _run_plan(self, plan: SearchPlan, query: str) -> SearchBag:
        if plan.type == "genre_search":
            keyword = plan.keyword or query
            return await self._fan_out(
                [
                    (
                        "tmdb",
                        "tmdb.discover_movies",
                        {"genreId": plan.genre_id, "sortBy": "popularity.desc", "page": 1},
                    ),
                    ("omdb", "omdb.search_movies", {"query": keyword}),
                    ("tvmaze", "tvmaze.search_shows", {"query": keyword}),
                ]
            )
        if plan.type == "popular_search":
            return {"tmdb": await self._call("tmdb.get_popular_movies", {"page": 1})}
        if plan.type == "director_search":
            return {
                "tmdb": await self._call(
                    "tmdb.search_movies_by_director", {"directorName": plan.director_name}
                )
            }

        text = plan.query or query
        return await self._fan_out(
            [
                ("tmdb", "tmdb.search_movies", {"query": text}),
                ("omdb", "omdb.search_movies", {"query": text}),
                ("tvmaze", "tvmaze.search_shows", {"query": text}),
            ]
        )

    def aggregate_search_results(self, bag: SearchBag) -> List[Movie]:
        """Normalize a bag of raw tool results and drop repeated titles.

        Providers are read in bag order, so catalog results come before ratings results
        and those before schedule results. Of several records with the same title and
        year, only the first one is kept.

        Args:
            bag: Provider name to raw tool result, None for failed providers.

        Returns:
            Normalized movies with aggregated ratings attached.
        """
        seen = set()
        movies: List[Movie] = []
        for provider, result in bag.items():
            if result is None:
                continue
            for movie in normalize_result(provider, result, self._image_base_url):
                key = f"{movie.title.lower()}-{movie.year or 'unknown'}"
                if key in seen:
                    continue
                seen.add(key)
                movies.append(self._aggregator.with_rating(movie))
        return movies

    async def _search(
        self, query: str, intent: Optional[Intent], trace: ExecutionTrace
    ) -> Tuple[List[Movie], List[str]]:
        started = time.monotonic()
        try:
            plan = self._strategy.select(query, intent)
            bag = await self._run_plan(plan, query)
            answered = [name for name, result in bag.items() if result is not None]
            trace.record(
                "search_sources",
                "multi_source_search",
                started,
                {"query": query, "strategy": plan.to_dict()},
                {name: result is not None for name, result in bag.items()},
            )

            movies = self.aggregate_search_results(bag)
            trace.record(
                "aggregate_results",
                "movie_aggregator",
                started,
                {"sources": answered},
                {"count": len(movies), "titles": [m.title for m in movies[:10]]},
            )
            return movies, answered
        except Exception as e:
            trace.record(
                "search_movies",
                "movie_search_workflow",
                started,
                {"query": query},
                success=False,
                error=_error_text(e),
            )
            raise

    async def _search_workflow(
        self, query: str, intent: Optional[Intent], trace: ExecutionTrace
    ) -> Dict[str, Any]:
        movies, sources = await self._search(query, intent, trace)
        return {
            "type": "search_results",
            "results": [m.to_dict() for m in movies],
            "sources": sources,
        }

    async def _details_workflow(
        self, query: str, intent: Intent, trace: ExecutionTrace
    ) -> Dict[str, Any]:
        started = time.monotonic()
        try:
            movies, _ = await self._search(extract_detail_subject(query), intent, trace)
            if not movies:
                raise MovieNotFoundError("No movies found")

            first = movies[0]
            if first.external_ids.tmdb:
                tool, args = "tmdb.get_movie_details", {"movieId": first.external_ids.tmdb}
            elif first.external_ids.imdb:
                tool = "tmdb.get_movie_by_external_id"
                args = {"externalId": first.external_ids.imdb, "source": "imdb"}
            else:
                raise MovieNotFoundError("No valid movie ID found")

            raw = await self._call(tool, args)
            movie = self._aggregator.with_rating(normalize("tmdb", raw, self._image_base_url))
            trace.record("get_movie_details", tool, started, args, movie.to_dict())
            return {"type": "movie_details", "movie": movie.to_dict(), "searchQuery": query}
        except Exception as e:
            trace.record(
                "get_movie_details",
                "movie_details_workflow",
                started,
                {"query": query},
                success=False,
                error=_error_text(e),
            )
            raise

    async def _resolve_title(self, title: str) -> Optional[Movie]:
        """Catalog-only lookup: first search hit, then its full record."""
        raw = await self._call("tmdb.search_movies", {"query": title})
        hits = normalize_result("tmdb", raw, self._image_base_url)
        if not hits or not hits[0].external_ids.tmdb:
            return None
        details = await self._call("tmdb.get_movie_details", {"movieId": hits[0].external_ids.tmdb})
        return self._aggregator.with_rating(normalize("tmdb", details, self._image_base_url))

    async def _compare_workflow(
        self, query: str, intent: Intent, trace: ExecutionTrace
    ) -> Dict[str, Any]:
        started = time.monotonic()
        try:
            titles = extract_compare_titles(query)
            if not titles:
                movies, _ = await self._search(query, intent, trace)
                titles = [m.title for m in movies[:2]] if len(movies) >= 2 else []

            if not titles:
                return {
                    "type": "comparison_results",
                    "message": "No movies found to compare",
                    "results": [],
                    "sources": [],
                }

            outcomes = await settle_all([self._resolve_title(title) for title in titles])
            resolved: List[Movie] = []
            for title, outcome in zip(titles, outcomes):
                if outcome.ok and outcome.value is not None:
                    resolved.append(outcome.value)
                else:
                    reason = _error_text(outcome.error) if outcome.error else "no match"
                    self.logger.warning(f"Failed to get details for '{title}': {reason}")

            trace.record(
                "compare_movies",
                "movie_comparison",
                started,
                {"movies": titles},
                [m.title for m in resolved],
            )

            if not resolved:
                return {
                    "type": "comparison_results",
                    "message": "No movie details found for comparison",
                    "results": [],
                    "sources": [],
                }

            result: Dict[str, Any] = {
                "type": "comparison_results",
                "results": [m.to_dict() for m in resolved],
                "sources": ["tmdb"],
            }
            if len(resolved) == 2:
                result["comparison"] = self._comparison_table(resolved[0], resolved[1])
            return result
        except Exception as e:
            trace.record(
                "compare_movies",
                "movie_comparison_workflow",
                started,
                {"query": query},
                success=False,
                error=_error_text(e),
            )
            raise

    def _comparison_table(self, first: Movie, second: Movie) -> Dict[str, Any]:
        scores = [
            self._aggregator.calculate_weighted_rating(first).score,
            self._aggregator.calculate_weighted_rating(second).score,
        ]
        if scores[0] == scores[1]:
            higher_rated = None
        else:
            higher_rated = first.title if scores[0] > scores[1] else second.title
        return {
            "titles": [first.title, second.title],
            "scores": scores,
            "years": [first.year, second.year],
            "runtimes": [first.runtime, second.runtime],
            "genres": [first.genres, second.genres],
            "sharedGenres": [g for g in first.genres if g in second.genres],
            "higherRated": higher_rated,
        }

    async def _recommend_workflow(
        self, query: str, user_id: Optional[str], trace: ExecutionTrace
    ) -> Dict[str, Any]:
        started = time.monotonic()
        try:
            history: List[Any] = []
            if user_id:
                try:
                    data = await self._call("user.get_watchlist", {"userId": user_id})
                    history = list((data or {}).get("movies") or [])
                    trace.record(
                        "load_user_history",
                        "user.get_watchlist",
                        started,
                        {"userId": user_id},
                        {"count": len(history)},
                    )
                except Exception as e:
                    self.logger.warning(f"Failed to load history of {user_id}: {_error_text(e)}")
                    trace.record(
                        "load_user_history",
                        "user.get_watchlist",
                        started,
                        {"userId": user_id},
                        success=False,
                        error=_error_text(e),
                    )

            bag = await self._run_plan(SearchPlan(type="direct_search", query=query), query)
            limit = self._config.workflow.recommendation_limit
            recommendations = self.aggregate_search_results(bag)[:limit]

            trace.record(
                "generate_recommendations",
                "recommendation_engine",
                started,
                {"query": query, "userHistory": len(history)},
                [m.title for m in recommendations],
            )
            return {
                "type": "recommendations",
                "recommendations": [m.to_dict() for m in recommendations],
                "basedOn": query,
                "userHistory": bool(history),
            }
        except Exception as e:
            trace.record(
                "recommend_movies",
                "recommendation_workflow",
                started,
                {"query": query, "userId": user_id},
                success=False,
                error=_error_text(e),
            )
            raise
