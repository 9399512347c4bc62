from .chat import ChatRateLimitError, ChatSdk, ChatServiceError, OpenAICompatibleChatSdk
from .environment import (
    HttpSdkEnvironment,
    ScriptLoadError,
    SdkEnvironment,
    default_model,
    get_sdk_environment,
)

__all__ = [
    "ChatRateLimitError",
    "ChatSdk",
    "ChatServiceError",
    "OpenAICompatibleChatSdk",
    "HttpSdkEnvironment",
    "ScriptLoadError",
    "SdkEnvironment",
    "default_model",
    "get_sdk_environment",
]
