"""Provider and tool registries.

Both are plain objects owned by whoever builds them (the container or a test), so
several independent registries can coexist in one process.
"""

from typing import Dict, List, Optional, Tuple

from ...infrastructure.logging import LoggerMixin
from ...utils import ToolNotFoundError
from ..interfaces import IMovieProvider, IToolServer, ToolSpec


class ProviderRegistry(LoggerMixin):
    """Provider adapters in registration (priority) order."""

    def __init__(self, providers: Optional[List[IMovieProvider]] = None) -> None:
        self._providers: Dict[str, IMovieProvider] = {}
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: IMovieProvider) -> None:
        """Register a provider under its name, replacing any previous one."""
        self._providers[provider.name] = provider
        self.logger.debug(f"Registered provider: {provider.name}")

    def lookup(self, name: str) -> Optional[IMovieProvider]:
        """Get a provider by name."""
        return self._providers.get(name)

    def owner_of(self, movie_id: str) -> Optional[IMovieProvider]:
        """Find the provider whose id prefix ``movie_id`` carries."""
        for provider in self._providers.values():
            if provider.owns(movie_id):
                return provider
        return None

    def list(self) -> List[IMovieProvider]:
        """All providers in priority order."""
        return list(self._providers.values())

    def __len__(self) -> int:
        return len(self._providers)


class ToolRegistry(LoggerMixin):
    """Tool servers addressable by ``server.tool`` names."""

    def __init__(self) -> None:
        self._servers: Dict[str, IToolServer] = {}

    def register(self, server: IToolServer) -> None:
        """Register a tool server under its name.

        Args:
            server: Tool server to expose.
        """
        self._servers[server.name] = server
        self.logger.info(f"Registered tool server '{server.name}' with {len(server.tools)} tools")

    def lookup(self, qualified_name: str) -> Tuple[IToolServer, ToolSpec]:
        """Resolve a qualified tool name.

        Args:
            qualified_name: Name of the form ``server.tool``.

        Returns:
            The server and the tool's spec.

        Raises:
            ToolNotFoundError: If the name is malformed or unknown.
        """
        parts = qualified_name.split(".")
        if len(parts) != 2 or not all(parts):
            raise ToolNotFoundError(
                f"Invalid tool name '{qualified_name}', expected 'server.tool'"
            )
        server_name, tool_name = parts

        server = self._servers.get(server_name)
        if server is None:
            raise ToolNotFoundError(f"Tool server not found: {server_name}")

        for spec in server.tools:
            if spec.name == tool_name:
                return server, spec
        raise ToolNotFoundError(f"Tool not found: {qualified_name}")

    def list(self) -> List[dict]:
        """Every registered tool with its qualified name and owning server."""
        tools = []
        for server in self._servers.values():
            for spec in server.tools:
                tools.append(
                    {
                        "name": f"{server.name}.{spec.name}",
                        "server": server.name,
                        "description": spec.description,
                        "inputSchema": spec.input_schema,
                    }
                )
        return tools

    def servers(self) -> List[IToolServer]:
        """Registered servers."""
        return list(self._servers.values())
