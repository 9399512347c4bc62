import json

import httpx
import pytest

from swenlog_ai.providers import ChatServiceError, OpenAICompatibleChatSdk
from swenlog_ai.services.ai.service import is_auth_failure


def mock_client(monkeypatch, handler):
    real_client = httpx.AsyncClient
    monkeypatch.setattr(
        httpx,
        "AsyncClient",
        lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
    )


@pytest.mark.asyncio
async def test_chat_posts_completion_without_stream_flag(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["payload"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": "hi"}}]})

    mock_client(monkeypatch, handler)
    sdk = OpenAICompatibleChatSdk(base_url="https://llm.test", api_key="k")

    reply = await sdk.chat("hello", {"model": "m", "stream": True, "temperature": 0.2, "max_tokens": 9})

    assert reply == {"choices": [{"message": {"content": "hi"}}]}
    assert seen["url"] == "https://llm.test/v1/chat/completions"
    assert seen["payload"] == {
        "model": "m",
        "messages": [{"role": "user", "content": "hello"}],
        "temperature": 0.2,
        "max_tokens": 9,
    }


@pytest.mark.asyncio
async def test_unauthorized_is_reported_as_auth_failure(monkeypatch):
    mock_client(monkeypatch, lambda request: httpx.Response(401, text="bad key"))
    sdk = OpenAICompatibleChatSdk(base_url="https://llm.test/v1", api_key="k")

    with pytest.raises(ChatServiceError) as exc_info:
        await sdk.chat("hello", {"model": "m"})

    assert is_auth_failure(exc_info.value)
