import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from swenlog_ai.core import get_settings, limiter
from swenlog_ai.dependencies import get_ai_service, get_assistant
from swenlog_ai.providers import ChatRateLimitError, ChatServiceError
from swenlog_ai.schemas import (
    AssistantRequest,
    AssistantResponse,
    ChatRequest,
    ChatResponse,
    ServiceStatusResponse,
)
from swenlog_ai.services.ai import (
    AIAssistant,
    AIService,
    ParsedResponse,
    RequestOptions,
    ServiceUnavailableError,
    extract_text_from_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.get("/status", response_model=ServiceStatusResponse)
async def ai_status(service: AIService = Depends(get_ai_service)):
    """Readiness of the AI SDK. Does not trigger initialization."""
    return ServiceStatusResponse(
        state=service.state.value,
        is_ready=service.is_service_ready(),
        model=service.model,
    )


@router.post("/chat", response_model=ChatResponse)
@limiter.limit(lambda: get_settings().chat_rate_limit)
async def ai_chat(
    request: Request,
    body: ChatRequest,
    service: AIService = Depends(get_ai_service),
):
    """Chatbot tester: send a prompt (or message list) straight to the AI SDK."""
    if not body.prompt and not body.messages:
        raise HTTPException(status_code=422, detail="prompt or messages is required")
    options = RequestOptions(
        temperature=body.temperature,
        max_tokens=body.max_tokens,
        model=body.model,
        timeout_ms=body.timeout_ms,
    )
    try:
        if body.messages:
            reply = await service.make_ai_chat([m.model_dump() for m in body.messages], options)
        else:
            reply = await service.make_ai_request(body.prompt, options)
    except ServiceUnavailableError as e:
        raise HTTPException(status_code=503, detail=e.message)
    except ChatRateLimitError as e:
        raise HTTPException(status_code=429, detail=str(e))
    except ChatServiceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if isinstance(reply, ParsedResponse):
        return ChatResponse(text=reply.text, model=reply.model, cached=reply.cached)
    return ChatResponse(text=extract_text_from_response(reply), model=options.model or service.model)


@router.post("/assistant", response_model=AssistantResponse)
@limiter.limit(lambda: get_settings().chat_rate_limit)
async def ai_assistant(
    request: Request,
    body: AssistantRequest,
    assistant: AIAssistant = Depends(get_assistant),
):
    """Logistics assistant with knowledge base and canned answers for generic replies."""
    answer = await assistant.query(
        body.prompt,
        context=body.context,
        system_prompt=body.system_prompt,
        model=body.model,
    )
    return AssistantResponse(text=answer.text, error=answer.error)
