import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ChatServiceError(Exception):
    """Raised when the chat/LLM API is unavailable or rejects the request."""


class ChatRateLimitError(ChatServiceError):
    """Raised when the chat/LLM API rate limits the request."""


class ChatSdk(ABC):
    """The AI chat SDK as seen by the readiness gate: one opaque `chat` call.

    Replies are returned as-is; their shape is not guaranteed (plain string,
    OpenAI-style `choices`, `{message: {content}}`, `{content}`, `{text}`).
    """

    @abstractmethod
    async def chat(self, prompt_or_messages: str | list[dict[str, Any]], api_options: dict[str, Any]) -> Any:
        pass


class OpenAICompatibleChatSdk(ChatSdk):
    """OpenAI-compatible /chat/completions endpoint (OpenAI, vLLM, Groq, etc.)."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        timeout: float = 60.0,
    ):
        self.base_url = base_url.rstrip("/")
        if not self.base_url.endswith("/v1"):
            self.base_url = f"{self.base_url}/v1"
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def chat(self, prompt_or_messages: str | list[dict[str, Any]], api_options: dict[str, Any]) -> Any:
        if isinstance(prompt_or_messages, str):
            messages = [{"role": "user", "content": prompt_or_messages}]
        else:
            messages = list(prompt_or_messages)
        payload: dict[str, Any] = {
            "model": api_options.get("model"),
            "messages": messages,
            "temperature": api_options.get("temperature", 0.7),
        }
        # "stream" is reserved; replies are always read whole
        if api_options.get("max_tokens") is not None:
            payload["max_tokens"] = api_options["max_tokens"]
        retries = 3
        base_delay_s = 1.0

        for attempt in range(retries + 1):
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    r = await client.post(
                        f"{self.base_url}/chat/completions",
                        json=payload,
                        headers=self._headers(),
                    )
                    r.raise_for_status()
                    try:
                        return r.json()
                    except ValueError:
                        return r.text
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                if status_code == 429:
                    if attempt < retries:
                        retry_after = e.response.headers.get("Retry-After")
                        try:
                            delay_s = float(retry_after) if retry_after else base_delay_s
                        except ValueError:
                            delay_s = base_delay_s
                        await asyncio.sleep(delay_s * (attempt + 1))
                        continue
                    raise ChatRateLimitError(
                        "Chat API rate limited the request. Please retry later."
                    ) from e
                body = getattr(e.response, "text", None) or ""
                if body:
                    logger.warning("Chat API error %s: %s", status_code, body[:500])
                if status_code in (401, 403):
                    raise ChatServiceError(
                        f"Chat API returned {status_code} Unauthorized (authentication failed)."
                    ) from e
                raise ChatServiceError(
                    f"Chat API returned {status_code}. Please try again later."
                ) from e
            except httpx.RequestError as e:
                raise ChatServiceError(
                    "Chat service unavailable (timeout or connection error). Please try again later."
                ) from e
        raise ChatServiceError("Chat API retries exhausted.")
