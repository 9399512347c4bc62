"""
Execution environment for the AI SDK.

The readiness gate never talks to the network directly. It asks an
SdkEnvironment three things: is the SDK script already loaded, load it, and
is the SDK object available yet. HttpSdkEnvironment loads by fetching the
SDK URL of an OpenAI-compatible endpoint once; after a successful load the
chat SDK becomes visible through get_sdk().
"""

import logging
from abc import ABC, abstractmethod

import httpx

from swenlog_ai.core import DEFAULT_CHAT_MODEL, Settings, get_settings
from swenlog_ai.providers.chat import ChatSdk, OpenAICompatibleChatSdk

logger = logging.getLogger(__name__)


class ScriptLoadError(Exception):
    """Raised when the SDK script/endpoint cannot be loaded."""


class SdkEnvironment(ABC):
    @property
    @abstractmethod
    def sdk_url(self) -> str:
        pass

    @abstractmethod
    def has_script(self, url: str) -> bool:
        """True when a script with exactly this URL is already loaded."""

    @abstractmethod
    async def load_script(self, url: str) -> None:
        """Load the SDK script. Raises ScriptLoadError on failure."""

    @abstractmethod
    def get_sdk(self) -> ChatSdk | None:
        """The live SDK global, or None while it is not (or no longer) available."""


class HttpSdkEnvironment(SdkEnvironment):
    """Loads an OpenAI-compatible chat API by probing its SDK URL once."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        sdk_url: str | None = None,
        timeout: float = 60.0,
    ):
        self.base_url = base_url.rstrip("/")
        if not self.base_url.endswith("/v1"):
            self.base_url = f"{self.base_url}/v1"
        self.api_key = api_key
        self.timeout = timeout
        self._sdk_url = sdk_url or f"{self.base_url}/models"
        self._loaded_scripts: set[str] = set()
        self._sdk: ChatSdk | None = None

    @property
    def sdk_url(self) -> str:
        return self._sdk_url

    def has_script(self, url: str) -> bool:
        return url in self._loaded_scripts

    async def load_script(self, url: str) -> None:
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            async with httpx.AsyncClient(timeout=min(self.timeout, 10.0)) as client:
                r = await client.get(url, headers=headers)
                # 401/403 still proves the endpoint is there; auth is handled per request
                if r.status_code >= 400 and r.status_code not in (401, 403):
                    raise ScriptLoadError(f"SDK load returned {r.status_code} for {url}")
        except httpx.RequestError as e:
            raise ScriptLoadError(f"Failed to load AI SDK from {url}") from e
        self._loaded_scripts.add(url)
        self._sdk = OpenAICompatibleChatSdk(
            base_url=self.base_url,
            api_key=self.api_key,
            timeout=self.timeout,
        )
        logger.info("AI SDK loaded from %s", url)

    def get_sdk(self) -> ChatSdk | None:
        return self._sdk


def get_sdk_environment(settings: Settings | None = None) -> SdkEnvironment | None:
    """Environment from settings; None when no AI endpoint is configured."""
    s = settings or get_settings()
    if s.ai_api_base_url:
        return HttpSdkEnvironment(
            base_url=s.ai_api_base_url,
            api_key=s.ai_api_key,
            sdk_url=s.ai_sdk_url,
            timeout=s.ai_request_timeout_seconds,
        )
    if s.openai_api_key:
        return HttpSdkEnvironment(
            base_url="https://api.openai.com/v1",
            api_key=s.openai_api_key,
            sdk_url=s.ai_sdk_url,
            timeout=s.ai_request_timeout_seconds,
        )
    logger.warning("AI SDK not configured. Set AI_API_BASE_URL or OPENAI_API_KEY.")
    return None


def default_model() -> str:
    return get_settings().ai_model or DEFAULT_CHAT_MODEL
