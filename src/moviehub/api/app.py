"""FastAPI application factory.

Wires the container's services into routers and maps the exception hierarchy onto HTTP
status codes.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.interfaces import IToolGateway
from ..core.services import HttpToolGateway, ProviderRegistry, ToolRegistry
from ..infrastructure import CacheManager, Container
from ..utils import (
    ConflictError,
    EmptyInputError,
    MovieHubError,
    MovieNotFoundError,
    ProviderError,
    ToolNotFoundError,
)
from .routers import search, watchlist, workflow
from .schemas import HealthResponse

logger = logging.getLogger(__name__)

# =============================================================================
# LIFESPAN
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Registers local tool servers with a remote gateway when one is configured, and
    closes every network session on shutdown.

    Args:
        app: FastAPI application instance.

    Yields:
        None after startup tasks complete.
    """
    container: Container = app.state.container
    await _register_with_gateway(container)
    try:
        yield
    finally:
        await container.aclose()


async def _register_with_gateway(container: Container) -> None:
    """Announce local tool servers to the remote gateway, if any."""
    config = container.get_config()
    gateway = container.get(IToolGateway)  # type: ignore
    if not isinstance(gateway, HttpToolGateway) or not config.workflow.advertise_url:
        return

    for server in container.get(ToolRegistry).servers():
        try:
            await gateway.register_server(server, config.workflow.advertise_url)
        except ProviderError as e:
            logger.error(f"Could not register tool server '{server.name}': {e}")


# =============================================================================
# APPLICATION FACTORY
# =============================================================================


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        container: Configured container. If None, one is built from the default config.

    Returns:
        Configured FastAPI instance.
    """
    if container is None:
        container = Container()
        container.configure_default_services()

    app = FastAPI(
        title="MovieHub",
        version=__version__,
        description="Multi-source movie search, aggregation and workflow API",
        lifespan=lifespan,
    )
    app.state.container = container

    _configure_cors(app, container)
    _register_exception_handlers(app)
    _register_routers(app)
    return app


def _configure_cors(app: FastAPI, container: Container) -> None:
    """Configure CORS middleware.

    Args:
        app: FastAPI application instance.
        container: Container holding the server configuration.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=container.get_config().server.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )


def _register_routers(app: FastAPI) -> None:
    """Register API routers.

    Args:
        app: FastAPI application instance.
    """
    app.include_router(search.router)
    app.include_router(workflow.router)
    app.include_router(watchlist.router)
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])


# =============================================================================
# ERROR MAPPING
# =============================================================================


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _register_exception_handlers(app: FastAPI) -> None:
    """Map domain exceptions to HTTP responses with an ``{"error": ...}`` body."""

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        return _error(status.HTTP_400_BAD_REQUEST, f"Invalid request: {details}")

    @app.exception_handler(EmptyInputError)
    async def _empty_input(request: Request, exc: EmptyInputError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(MovieNotFoundError)
    async def _not_found(request: Request, exc: MovieNotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(ToolNotFoundError)
    async def _tool_not_found(request: Request, exc: ToolNotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(ConflictError)
    async def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(MovieHubError)
    async def _domain_error(request: Request, exc: MovieHubError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Internal server error")


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================


async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Returns:
        Service status with cache, LLM and tool availability.
    """
    container: Container = request.app.state.container
    config = container.get_config()
    return HealthResponse(
        status="healthy",
        version=__version__,
        cache=await container.get(CacheManager).is_available(),
        llm=config.llm.usable,
        providers=[p.name for p in container.get(ProviderRegistry).list()],
        tools=len(container.get(ToolRegistry).list()),
    )
