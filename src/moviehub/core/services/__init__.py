"""Core service implementations."""

from .intent_analyzer import (
    DirectorNameExtractor,
    LLMIntentClassifier,
    RuleBasedIntentClassifier,
    SearchStrategySelector,
)
from .llm_services import AnthropicLLMService, OpenAILLMService
from .movie_aggregator import MovieAggregator
from .omdb_provider import OMDbProvider
from .registry import ProviderRegistry, ToolRegistry
from .search_aggregator import SearchAggregator
from .summary_service import MovieSummaryService
from .tmdb_provider import TMDbProvider
from .tool_gateways import HttpToolGateway, LocalToolGateway
from .tool_servers import OMDbToolServer, TMDbToolServer, TVMazeToolServer, UserToolServer
from .tvmaze_provider import TVMazeProvider
from .watchlist_store import InMemoryWatchlistStore
from .workflow_orchestrator import WorkflowOrchestrator

__all__ = [
    "MovieAggregator",
    "TMDbProvider",
    "OMDbProvider",
    "TVMazeProvider",
    "ProviderRegistry",
    "ToolRegistry",
    "TMDbToolServer",
    "OMDbToolServer",
    "TVMazeToolServer",
    "UserToolServer",
    "LocalToolGateway",
    "HttpToolGateway",
    "SearchAggregator",
    "OpenAILLMService",
    "AnthropicLLMService",
    "RuleBasedIntentClassifier",
    "LLMIntentClassifier",
    "DirectorNameExtractor",
    "SearchStrategySelector",
    "WorkflowOrchestrator",
    "InMemoryWatchlistStore",
    "MovieSummaryService",
]
