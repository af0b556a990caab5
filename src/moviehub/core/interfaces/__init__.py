"""Core interfaces."""

from .cache import ICache
from .intent_classifier import IIntentClassifier
from .llm_service import ILLMService
from .movie_provider import IMovieProvider
from .search_aggregator import ISearchAggregator
from .summary_service import ISummaryService
from .tool_gateway import IToolGateway, IToolServer, ToolSpec
from .watchlist_store import IWatchlistStore
from .workflow_orchestrator import IWorkflowOrchestrator

__all__ = [
    "ICache",
    "IIntentClassifier",
    "ILLMService",
    "IMovieProvider",
    "ISearchAggregator",
    "ISummaryService",
    "IToolGateway",
    "IToolServer",
    "ToolSpec",
    "IWatchlistStore",
    "IWorkflowOrchestrator",
]
