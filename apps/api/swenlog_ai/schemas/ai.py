from typing import Any, Optional

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: str
    content: Any


class ChatRequest(BaseModel):
    """Body of POST /ai/chat (chatbot tester). Either prompt or messages is required."""

    prompt: Optional[str] = None
    messages: Optional[list[ChatMessage]] = None
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    model: Optional[str] = None
    timeout_ms: Optional[int] = Field(default=None, gt=0)


class ChatResponse(BaseModel):
    text: str
    model: Optional[str] = None
    cached: bool = False


class AssistantRequest(BaseModel):
    prompt: str = Field(min_length=1)
    context: Optional[str] = None
    system_prompt: Optional[str] = None
    model: Optional[str] = None


class AssistantResponse(BaseModel):
    text: str
    error: Optional[str] = None


class ServiceStatusResponse(BaseModel):
    state: str
    is_ready: bool
    model: str
