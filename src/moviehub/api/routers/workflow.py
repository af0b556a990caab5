"""Workflow orchestration and tool gateway endpoints."""

from typing import Any, Dict

from fastapi import APIRouter

from ..dependencies import LocalGatewayDep, OrchestratorDep
from ..schemas import CallToolRequest, ExecuteRequest

router = APIRouter(tags=["Workflow"])


@router.post("/execute", summary="Run a natural language query")
async def execute(request: ExecuteRequest, orchestrator: OrchestratorDep) -> Dict[str, Any]:
    """Execute the intent-driven workflow.

    Workflow failures are reported in the body with ``success: false`` and HTTP 200.
    """
    result = await orchestrator.execute(request.query, request.user_id)
    return {"success": result.success, "result": result.to_dict()}


@router.post("/call-tool", summary="Invoke one tool")
async def call_tool(request: CallToolRequest, gateway: LocalGatewayDep) -> Dict[str, Any]:
    result = await gateway.call_tool(request.tool_name, request.args)
    return {"success": True, "result": result}


@router.get("/tools", summary="List registered tools")
async def list_tools(gateway: LocalGatewayDep) -> Dict[str, Any]:
    return {"tools": await gateway.list_tools()}
