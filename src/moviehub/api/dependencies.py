"""FastAPI dependencies resolving services from the application container."""

from typing import Annotated

from fastapi import Depends, Request

from ..core.interfaces import (
    ISearchAggregator,
    ISummaryService,
    IWatchlistStore,
    IWorkflowOrchestrator,
)
from ..core.services import LocalToolGateway, MovieAggregator, ToolRegistry
from ..infrastructure import Container


def get_container(request: Request) -> Container:
    """Return the container attached by ``create_app``."""
    return request.app.state.container


ContainerDep = Annotated[Container, Depends(get_container)]


def get_search_aggregator(container: ContainerDep) -> ISearchAggregator:
    return container.get(ISearchAggregator)  # type: ignore


def get_movie_aggregator(container: ContainerDep) -> MovieAggregator:
    return container.get(MovieAggregator)


def get_summary_service(container: ContainerDep) -> ISummaryService:
    return container.get(ISummaryService)  # type: ignore


def get_orchestrator(container: ContainerDep) -> IWorkflowOrchestrator:
    return container.get(IWorkflowOrchestrator)  # type: ignore


def get_watchlist_store(container: ContainerDep) -> IWatchlistStore:
    return container.get(IWatchlistStore)  # type: ignore


def get_local_gateway(container: ContainerDep) -> LocalToolGateway:
    """Gateway over the tool servers of this process.

    ``/call-tool`` always dispatches locally, even when the orchestrator itself is
    configured to call a remote gateway.
    """
    return LocalToolGateway(container.get(ToolRegistry))


SearchAggregatorDep = Annotated[ISearchAggregator, Depends(get_search_aggregator)]
MovieAggregatorDep = Annotated[MovieAggregator, Depends(get_movie_aggregator)]
SummaryServiceDep = Annotated[ISummaryService, Depends(get_summary_service)]
OrchestratorDep = Annotated[IWorkflowOrchestrator, Depends(get_orchestrator)]
WatchlistStoreDep = Annotated[IWatchlistStore, Depends(get_watchlist_store)]
LocalGatewayDep = Annotated[LocalToolGateway, Depends(get_local_gateway)]
