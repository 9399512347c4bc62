from fastapi import Request

from swenlog_ai.services.ai import AIAssistant, AIService, CacheStorage, DiagnosticsBus


def get_ai_service(request: Request) -> AIService:
    return request.app.state.ai_service


def get_cache_storage(request: Request) -> CacheStorage:
    return request.app.state.cache_storage


def get_diagnostics(request: Request) -> DiagnosticsBus:
    return request.app.state.diagnostics


def get_assistant(request: Request) -> AIAssistant:
    return request.app.state.assistant
