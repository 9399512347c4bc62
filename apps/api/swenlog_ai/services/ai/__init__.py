"""AI SDK readiness, request dispatch, reply parsing and cached AI actions."""

from .assistant import AIAnswer, AIAssistant, TrainingEntry, is_generic_response
from .cached_action import ActionResult, CacheEntry, CachedAIAction
from .diagnostics import DiagnosticsBus, DiagnosticsEntry
from .errors import AIServiceError, AIStage, ParseFailureError, ServiceUnavailableError
from .json_extract import coerce_array, extract_json, safe_number
from .response_parser import extract_text_from_response
from .service import (
    AIService,
    ParsedResponse,
    RequestOptions,
    ServiceReadinessState,
    ServiceState,
    build_ai_service,
)
from .storage import CacheStorage, JsonFileStorage, MemoryStorage, StorageReadResult

__all__ = [
    "AIAnswer",
    "AIAssistant",
    "TrainingEntry",
    "is_generic_response",
    "ActionResult",
    "CacheEntry",
    "CachedAIAction",
    "DiagnosticsBus",
    "DiagnosticsEntry",
    "AIServiceError",
    "AIStage",
    "ParseFailureError",
    "ServiceUnavailableError",
    "coerce_array",
    "extract_json",
    "safe_number",
    "extract_text_from_response",
    "AIService",
    "ParsedResponse",
    "RequestOptions",
    "ServiceReadinessState",
    "ServiceState",
    "build_ai_service",
    "CacheStorage",
    "JsonFileStorage",
    "MemoryStorage",
    "StorageReadResult",
]
