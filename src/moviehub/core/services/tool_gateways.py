"""Tool gateways: in-process dispatch and remote HTTP dispatch."""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp

from ...infrastructure.logging import LoggerMixin
from ...infrastructure.retry import TRANSIENT_STATUSES, RetryPolicy
from ...utils import ProviderError, ToolCallError, ToolNotFoundError
from ..interfaces import IToolGateway, IToolServer
from .registry import ToolRegistry


class LocalToolGateway(IToolGateway, LoggerMixin):
    """Dispatches tool calls to servers registered in this process."""

    def __init__(self, registry: ToolRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def call_tool(self, qualified_name: str, args: Dict[str, Any]) -> Any:
        server, spec = self._registry.lookup(qualified_name)
        try:
            return await server.call(spec.name, args or {})
        except (ToolNotFoundError, ToolCallError):
            raise
        except Exception as e:
            self.logger.warning(f"Tool call failed: {qualified_name}: {e}")
            raise ToolCallError(f"{qualified_name} failed: {e}") from e

    async def list_tools(self) -> List[Dict[str, Any]]:
        return self._registry.list()


class HttpToolGateway(IToolGateway, LoggerMixin):
    """Calls tools through a remote gateway's ``/call-tool`` endpoint."""

    def __init__(self, base_url: str, timeout: float, retry_policy: RetryPolicy) -> None:
        """Initialize HTTP gateway client.

        Args:
            base_url: Remote gateway base URL.
            timeout: Request timeout in seconds.
            retry_policy: Retry policy used for server registration.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retry = retry_policy
        self._session: Optional[aiohttp.ClientSession] = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            )
        return self._session

    async def call_tool(self, qualified_name: str, args: Dict[str, Any]) -> Any:
        payload = {"toolName": qualified_name, "args": args or {}}
        try:
            async with self._get_session().post(
                f"{self._base_url}/call-tool", json=payload
            ) as response:
                data = await response.json(content_type=None)
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ToolCallError(f"{qualified_name} failed: gateway unreachable: {e}") from e

        error = data.get("error") if isinstance(data, dict) else None
        if status == 404:
            raise ToolNotFoundError(error or f"Tool not found: {qualified_name}")
        if status >= 400 or not isinstance(data, dict) or not data.get("success"):
            raise ToolCallError(f"{qualified_name} failed: {error or f'HTTP {status}'}")
        return data.get("result")

    async def list_tools(self) -> List[Dict[str, Any]]:
        try:
            async with self._get_session().get(f"{self._base_url}/tools") as response:
                response.raise_for_status()
                data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.error(f"Failed to list remote tools: {e}")
            return []
        return list(data.get("tools") or [])

    async def register_server(self, server: IToolServer, advertise_url: str) -> None:
        """Announce a local tool server to the remote gateway.

        Transient failures are retried under the bounded retry policy.

        Args:
            server: Server to register.
            advertise_url: URL at which the remote gateway can reach this process.

        Raises:
            ProviderError: If registration still fails after the last attempt.
        """
        payload = {
            "name": server.name,
            "description": server.description,
            "url": advertise_url,
            "tools": [spec.to_dict() for spec in server.tools],
        }
        await self._retry.call(self._post_registration, payload)
        self.logger.info(f"Registered tool server '{server.name}' with {self._base_url}")

    async def _post_registration(self, payload: Dict[str, Any]) -> None:
        try:
            async with self._get_session().post(
                f"{self._base_url}/register", json=payload
            ) as response:
                if response.status >= 400:
                    raise ProviderError(
                        f"Gateway registration failed with HTTP {response.status}",
                        provider="gateway",
                        status=response.status,
                        transient=response.status in TRANSIENT_STATUSES,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProviderError(
                f"Gateway unreachable: {e}", provider="gateway", transient=True
            ) from e

    async def close(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None
