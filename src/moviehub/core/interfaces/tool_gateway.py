"""Tool server and gateway interfaces."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from pydantic import Field

from ..models import CamelModel


class ToolSpec(CamelModel):
    """Description of one callable tool."""

    name: str
    description: str = ""
    input_schema: Dict[str, Any] = Field(default_factory=lambda: {"type": "object"})

    @property
    def required(self) -> List[str]:
        """Names of required arguments."""
        return list(self.input_schema.get("required", []))


class IToolServer(ABC):
    """A named group of tools backed by one provider."""

    name: str = ""
    description: str = ""

    @property
    @abstractmethod
    def tools(self) -> List[ToolSpec]:
        """Tools this server exposes."""
        pass

    @abstractmethod
    async def call(self, tool: str, args: Dict[str, Any]) -> Any:
        """Run one tool.

        Args:
            tool: Unqualified tool name.
            args: Tool arguments.

        Returns:
            The tool's native result payload.

        Raises:
            ToolNotFoundError: If the server has no such tool.
            ToolCallError: If the arguments are invalid.
        """
        pass


class IToolGateway(ABC):
    """Generic ``server.tool`` call gateway used by the workflow orchestrator."""

    @abstractmethod
    async def call_tool(self, qualified_name: str, args: Dict[str, Any]) -> Any:
        """Call a tool by its qualified name.

        Args:
            qualified_name: Name of the form ``server.tool``.
            args: Tool arguments.

        Returns:
            Tool result payload.

        Raises:
            ToolNotFoundError: If the name does not resolve to a registered tool.
            ToolCallError: If the downstream call fails.
        """
        pass

    @abstractmethod
    async def list_tools(self) -> List[Dict[str, Any]]:
        """List every available tool with its qualified name."""
        pass

    async def close(self) -> None:
        """Release transport resources."""
        return None
