"""Workflow execution data models."""

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import ConfigDict, Field

from .intent import Intent
from .movie import CamelModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExecutionStep(CamelModel):
    """Immutable log record of one workflow step."""

    model_config = ConfigDict(frozen=True)

    step: str = Field(..., description="Step name")
    tool: str = Field(..., description="Tool or component that ran the step")
    input: Any = None
    output: Any = None
    duration: int = Field(..., ge=0, description="Milliseconds since the branch started")
    success: bool
    error: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utcnow)


class WorkflowResult(CamelModel):
    """Outcome of one workflow execution. Failures are reported, never raised."""

    query: str
    intent: Optional[Intent] = None
    result: Optional[Any] = None
    execution_trace: List[ExecutionStep] = Field(default_factory=list)
    total_duration: int = Field(default=0, ge=0)
    success: bool
    error: Optional[str] = None
