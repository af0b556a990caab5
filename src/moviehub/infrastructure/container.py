"""Dependency injection container."""

import inspect
import logging
from functools import lru_cache
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from ..config import Config, ConfigManager
from ..core.interfaces import (
    ILLMService,
    ISearchAggregator,
    ISummaryService,
    IToolGateway,
    IWatchlistStore,
    IWorkflowOrchestrator,
)
from .cache import CacheManager, create_cache
from .retry import RetryPolicy

T = TypeVar("T")


class Container:
    """Dependency injection container using registry pattern."""

    def __init__(self, config_manager: Optional[ConfigManager] = None) -> None:
        """Initialize container.

        Args:
            config_manager: Configuration manager instance. If None, creates default.
        """
        self._services: Dict[Type, Any] = {}
        self._factories: Dict[Type, Callable[[], Any]] = {}
        self._singletons: Dict[Type, Any] = {}
        self._config_manager = config_manager or ConfigManager()
        self._logger = logging.getLogger(__name__)

    def register_singleton(self, interface: Type[T], implementation: Type[Any]) -> None:
        """Register a singleton service.

        Args:
            interface: Interface type.
            implementation: Implementation type.
        """
        self._services[interface] = implementation
        self._logger.debug(
            f"Registered singleton: {interface.__name__} -> {implementation.__name__}"
        )

    def register_factory(self, interface: Type[T], factory: Callable[[], T]) -> None:
        """Register a factory function.

        Args:
            interface: Interface type.
            factory: Factory function that creates instances.
        """
        self._factories[interface] = factory
        self._logger.debug(f"Registered factory: {interface.__name__}")

    def register_instance(self, interface: Type[T], instance: T) -> None:
        """Register a specific instance.

        Args:
            interface: Interface type.
            instance: Pre-created instance.
        """
        self._singletons[interface] = instance
        self._logger.debug(f"Registered instance: {interface.__name__}")

    def has(self, interface: Type[Any]) -> bool:
        """Check whether an interface can be resolved."""
        return (
            interface in self._singletons
            or interface in self._factories
            or interface in self._services
        )

    def get(self, interface: Type[T]) -> T:
        """Get service instance.

        Args:
            interface: Interface type to resolve.

        Returns:
            Service instance.

        Raises:
            ValueError: If service is not registered.
        """
        if interface in self._singletons:
            return self._singletons[interface]  # type: ignore

        if interface in self._factories:
            return self._factories[interface]()  # type: ignore

        if interface in self._services:
            implementation = self._services[interface]
            self._singletons[interface] = self._create_instance(implementation)
            return self._singletons[interface]  # type: ignore

        raise ValueError(f"Service not registered: {interface.__name__}")

    def _create_instance(self, implementation: Type[T]) -> T:
        """Create instance with dependency injection.

        Constructor parameters annotated with ``Config`` or a registered type are
        resolved; parameters with defaults are left alone.

        Args:
            implementation: Implementation class to instantiate.

        Returns:
            Created instance with dependencies injected.
        """
        sig = inspect.signature(implementation.__init__)
        kwargs = {}

        for param_name, param in sig.parameters.items():
            if param_name == "self":
                continue

            if param.annotation == Config:
                kwargs[param_name] = self.get_config()
            elif hasattr(param.annotation, "__origin__"):
                # Optional[...] and other generics are not resolved
                continue
            elif self.has(param.annotation):
                kwargs[param_name] = self.get(param.annotation)
            elif param.default is not inspect.Parameter.empty:
                continue
            else:
                self._logger.warning(
                    f"Cannot resolve dependency: {param_name} of type {param.annotation}"
                )

        return implementation(**kwargs)

    @lru_cache(maxsize=1)
    def get_config(self) -> Config:
        """Get configuration instance.

        Returns:
            Configuration instance.
        """
        return self._config_manager.get_config()

    def configure_default_services(self) -> None:
        """Configure default service registrations."""
        from ..core.services import (
            AnthropicLLMService,
            HttpToolGateway,
            InMemoryWatchlistStore,
            LLMIntentClassifier,
            LocalToolGateway,
            MovieAggregator,
            MovieSummaryService,
            OMDbProvider,
            OMDbToolServer,
            OpenAILLMService,
            ProviderRegistry,
            RuleBasedIntentClassifier,
            SearchAggregator,
            SearchStrategySelector,
            TMDbProvider,
            TMDbToolServer,
            ToolRegistry,
            TVMazeProvider,
            TVMazeToolServer,
            UserToolServer,
            WorkflowOrchestrator,
        )

        config = self.get_config()

        retry_policy = RetryPolicy(config.retry)
        self.register_instance(RetryPolicy, retry_policy)
        self.register_instance(CacheManager, create_cache(config.cache))
        self.register_singleton(MovieAggregator, MovieAggregator)
        self.register_singleton(IWatchlistStore, InMemoryWatchlistStore)  # type: ignore

        # Provider adapters, in merge priority order
        tmdb = TMDbProvider(config.tmdb, retry_policy)
        omdb = OMDbProvider(config.omdb, retry_policy)
        tvmaze = TVMazeProvider(config.tvmaze, retry_policy)
        self.register_instance(ProviderRegistry, ProviderRegistry([tmdb, omdb, tvmaze]))

        tools = ToolRegistry()
        tools.register(TMDbToolServer(tmdb))
        tools.register(OMDbToolServer(omdb))
        tools.register(TVMazeToolServer(tvmaze))
        tools.register(UserToolServer(self.get(IWatchlistStore)))  # type: ignore
        self.register_instance(ToolRegistry, tools)

        if config.workflow.gateway == "http":
            gateway: IToolGateway = HttpToolGateway(
                config.workflow.gateway_url, config.workflow.tool_timeout, retry_policy
            )
        else:
            gateway = LocalToolGateway(tools)
        self.register_instance(IToolGateway, gateway)  # type: ignore

        # LLM Service based on provider, only when a key is configured
        if config.llm.usable:
            if config.llm.provider == "openai":
                self.register_singleton(ILLMService, OpenAILLMService)  # type: ignore
            elif config.llm.provider == "anthropic":
                self.register_singleton(ILLMService, AnthropicLLMService)  # type: ignore
            else:
                raise ValueError(f"Unsupported LLM provider: {config.llm.provider}")
        else:
            self._logger.info("No LLM configured, using rule-based intent analysis")

        llm_service = self.get(ILLMService) if self.has(ILLMService) else None  # type: ignore
        aggregator = self.get(MovieAggregator)

        search_aggregator = SearchAggregator(
            config, self.get(ProviderRegistry), self.get(CacheManager), aggregator
        )
        self.register_instance(ISearchAggregator, search_aggregator)  # type: ignore
        self.register_instance(
            IWorkflowOrchestrator,  # type: ignore
            WorkflowOrchestrator(
                config,
                gateway,
                aggregator=aggregator,
                llm_classifier=LLMIntentClassifier(llm_service) if llm_service else None,
                fallback_classifier=RuleBasedIntentClassifier(),
                strategy_selector=SearchStrategySelector(),
            ),
        )
        self.register_instance(
            ISummaryService,  # type: ignore
            MovieSummaryService(llm_service, self.get(CacheManager)),
        )

        self._logger.info("Default services configured")

    async def aclose(self) -> None:
        """Close network sessions and cache connections held by services."""
        from ..core.services import ProviderRegistry

        if ProviderRegistry in self._singletons:
            for provider in self._singletons[ProviderRegistry].list():
                await provider.close()
        if IToolGateway in self._singletons:
            await self._singletons[IToolGateway].close()
        if CacheManager in self._singletons:
            await self._singletons[CacheManager].close()
        self._logger.debug("Container resources closed")

    def reset(self) -> None:
        """Reset container state."""
        self._services.clear()
        self._factories.clear()
        self._singletons.clear()
        self.get_config.cache_clear()
        self._logger.debug("Container reset")

    async def __aenter__(self) -> "Container":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.aclose()
