import asyncio
from typing import Any

import pytest

from swenlog_ai.core import get_settings
from swenlog_ai.providers import ChatSdk, SdkEnvironment
from swenlog_ai.services.ai import AIService

SDK_URL = "https://sdk.test/v1/models"


class FakeSdk(ChatSdk):
    def __init__(self, reply: Any = "ok", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[Any, dict]] = []

    async def chat(self, prompt_or_messages, api_options):
        self.calls.append((prompt_or_messages, dict(api_options)))
        if self.error is not None:
            raise self.error
        return self.reply


class FakeEnvironment(SdkEnvironment):
    """SDK appears when the script loads (or never, with sdk=None)."""

    def __init__(
        self,
        sdk: ChatSdk | None = None,
        preloaded: bool = False,
        load_error: Exception | None = None,
        load_delay: float = 0.01,
    ):
        self._pending_sdk = sdk
        self._sdk: ChatSdk | None = sdk if preloaded else None
        self.scripts: set[str] = {SDK_URL} if preloaded else set()
        self.load_calls = 0
        self.load_error = load_error
        self.load_delay = load_delay

    @property
    def sdk_url(self) -> str:
        return SDK_URL

    def has_script(self, url: str) -> bool:
        return url in self.scripts

    async def load_script(self, url: str) -> None:
        self.load_calls += 1
        await asyncio.sleep(self.load_delay)
        if self.load_error is not None:
            raise self.load_error
        self.scripts.add(url)
        self._sdk = self._pending_sdk

    def get_sdk(self) -> ChatSdk | None:
        return self._sdk

    def set_sdk(self, sdk: ChatSdk | None) -> None:
        self._sdk = sdk


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_service(environment: SdkEnvironment | None, **kwargs) -> AIService:
    kwargs.setdefault("model", "test-model")
    kwargs.setdefault("max_attempts", 5)
    kwargs.setdefault("poll_interval_ms", 1)
    kwargs.setdefault("default_timeout_ms", 200)
    return AIService(environment, **kwargs)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    for name in ("AI_API_BASE_URL", "AI_API_KEY", "OPENAI_API_KEY", "AI_SDK_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("AI_READY_TIMEOUT_MS", "50")
    monkeypatch.setenv("AI_WARMUP_ON_STARTUP", "false")
    monkeypatch.setenv("AI_CACHE_DIR", str(tmp_path / "ai-cache"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
