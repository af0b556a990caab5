"""Workflow orchestrator interface."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import WorkflowResult


class IWorkflowOrchestrator(ABC):
    """Turns a natural language query into tool calls and a ranked result."""

    @abstractmethod
    async def execute(self, query: str, user_id: Optional[str] = None) -> WorkflowResult:
        """Run the workflow for one query.

        Args:
            query: Natural language query.
            user_id: Optional user for recommendation history.

        Returns:
            Workflow result. Never raises; failures come back with ``success=False``.
        """
        pass
