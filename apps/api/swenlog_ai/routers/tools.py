import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from swenlog_ai.core import get_settings, limiter
from swenlog_ai.dependencies import get_ai_service, get_cache_storage, get_diagnostics
from swenlog_ai.schemas import ToolRunResponse
from swenlog_ai.services.ai import AIService, CacheStorage, DiagnosticsBus
from swenlog_ai.services.tools import TOOLS, UnknownToolError, build_tool_action, get_tool

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools", tags=["tools"])


@router.get("")
async def list_tools():
    return {"tools": sorted(TOOLS)}


@router.post("/{tool_name}", response_model=ToolRunResponse)
@limiter.limit(lambda: get_settings().tools_rate_limit)
async def run_tool(
    request: Request,
    tool_name: str,
    params: dict[str, Any] = Body(default_factory=dict),
    service: AIService = Depends(get_ai_service),
    storage: CacheStorage = Depends(get_cache_storage),
    diagnostics: DiagnosticsBus = Depends(get_diagnostics),
):
    """Run one AI-backed tool. A non-null error means no live or fallback result is available."""
    try:
        tool = get_tool(tool_name)
    except UnknownToolError:
        raise HTTPException(status_code=404, detail=f"Unknown tool '{tool_name}'")
    try:
        parsed_params = tool.params_model.model_validate(params)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))

    action = build_tool_action(service, storage, tool, parsed_params, diagnostics)
    result = await action.run()
    if result.error:
        logger.info("tool %s finished with error: %s", tool_name, result.error)
    return ToolRunResponse(
        tool=tool.name,
        cache_key=action.cache_key,
        data=result.data,
        error=result.error,
        from_fallback=result.from_fallback,
    )
