"""Core configuration, constants and shared infrastructure."""

from swenlog_ai.core.config import Settings, get_settings
from swenlog_ai.core.constants import (
    AUTH_FAILURE_MARKERS,
    CACHED_ACTION_MAX_TOKENS,
    CACHED_ACTION_TEMPERATURE,
    DEFAULT_CHAT_MODEL,
    NO_RESPONSE_MESSAGE,
    RESPONSE_ERROR_MESSAGE,
    UNPROCESSABLE_RESPONSE_MESSAGE,
)
from swenlog_ai.core.limiter import limiter

__all__ = [
    "Settings",
    "get_settings",
    "AUTH_FAILURE_MARKERS",
    "CACHED_ACTION_MAX_TOKENS",
    "CACHED_ACTION_TEMPERATURE",
    "DEFAULT_CHAT_MODEL",
    "NO_RESPONSE_MESSAGE",
    "RESPONSE_ERROR_MESSAGE",
    "UNPROCESSABLE_RESPONSE_MESSAGE",
    "limiter",
]
