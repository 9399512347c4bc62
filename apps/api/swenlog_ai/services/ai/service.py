"""
AI service: readiness gate and request dispatcher for the external AI SDK.

One AIService is built per process (see build_ai_service) and handed to
everything that talks to the SDK. It

  - loads the SDK once (initialize): script load, then a bounded poll for
    the SDK object; concurrent callers share the same in-flight task,
  - answers readiness cheaply (is_service_ready), re-checking the live SDK
    object at most once per TTL window,
  - waits for readiness with a bound (ensure_ready),
  - publishes readiness transitions to subscribers (on_ready),
  - dispatches chat requests and normalizes replies (make_ai_request,
    make_ai_chat). Authentication failures degrade to a canned reply.

States: uninitialized -> initializing -> ready | unavailable. A later
initialize() after "unavailable" starts a new attempt; "ready" is only left
through the TTL re-check.
"""

import asyncio
import itertools
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from swenlog_ai.core import AUTH_FAILURE_MARKERS, Settings, get_settings
from swenlog_ai.data.ai_fallbacks import get_canned_reply
from swenlog_ai.providers import ChatSdk, SdkEnvironment, default_model, get_sdk_environment

from .errors import ServiceUnavailableError
from .response_parser import extract_text_from_response

logger = logging.getLogger(__name__)

ReadyListener = Callable[[bool], None]


class ServiceState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    UNAVAILABLE = "unavailable"


@dataclass
class ServiceReadinessState:
    is_initialized: bool = False
    is_ready: bool = False
    last_ready_check: Optional[float] = None
    state: ServiceState = ServiceState.UNINITIALIZED


class RequestOptions(BaseModel):
    """Per-call request options; unset values take the service defaults."""

    model_config = ConfigDict(frozen=True)

    temperature: float | None = Field(default=None, ge=0, le=2)
    max_tokens: int | None = Field(default=None, gt=0)
    raw_response: bool = False
    stream: bool = False
    model: str | None = None
    timeout_ms: int | None = Field(default=None, gt=0)


class ParsedResponse(BaseModel):
    text: str
    raw: Any = None
    model: str | None = None
    cached: bool = False


def is_auth_failure(error: BaseException) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in AUTH_FAILURE_MARKERS)


class AIService:
    def __init__(
        self,
        environment: SdkEnvironment | None,
        *,
        model: str | None = None,
        default_temperature: float = 0.7,
        max_attempts: int = 50,
        poll_interval_ms: int = 100,
        ready_ttl_seconds: float = 10.0,
        default_timeout_ms: int = 4000,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._environment = environment
        self.model = model or default_model()
        self.default_temperature = default_temperature
        self.max_attempts = max_attempts
        self.poll_interval_ms = poll_interval_ms
        self.ready_ttl_seconds = ready_ttl_seconds
        self.default_timeout_ms = default_timeout_ms
        self._clock = clock
        self._sleep = sleep
        self._state = ServiceReadinessState()
        self._listeners: list[tuple[int, ReadyListener]] = []
        self._listener_ids = itertools.count()
        self._init_task: asyncio.Task | None = None

    # -------------------------------------------------------------------------
    # Readiness
    # -------------------------------------------------------------------------

    @property
    def state(self) -> ServiceState:
        return self._state.state

    async def initialize(self) -> bool:
        """Load the SDK once and wait for it; True when it became available. Never raises."""
        if self._state.is_ready and self.is_service_ready():
            return True
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._run_initialize())
        # shield: a cancelled caller must not cancel the sequence other callers share
        return await asyncio.shield(self._init_task)

    async def _run_initialize(self) -> bool:
        st = self._state
        st.is_initialized = True
        st.state = ServiceState.INITIALIZING
        try:
            env = self._environment
            if env is None:
                logger.warning("AI SDK environment unavailable; AI features disabled")
                self._set_ready(False)
                return False
            url = env.sdk_url
            if not env.has_script(url):
                await env.load_script(url)
            sdk = await self._poll_for_sdk()
            if sdk is None:
                logger.warning(
                    "AI SDK not available after %s attempts x %sms",
                    self.max_attempts,
                    self.poll_interval_ms,
                )
                self._set_ready(False)
                return False
            self._set_ready(True)
            logger.info("AI service is ready (model=%s)", self.model)
            return True
        except Exception:
            logger.exception("Error initializing AI SDK")
            self._set_ready(False)
            return False
        finally:
            self._init_task = None

    async def aclose(self) -> None:
        """Cancel an in-flight initialize() sequence (application shutdown)."""
        task = self._init_task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("AI SDK initialization cancelled")

    async def _poll_for_sdk(self) -> ChatSdk | None:
        env = self._environment
        for _ in range(self.max_attempts):
            sdk = env.get_sdk()
            if sdk is not None:
                return sdk
            await self._sleep(self.poll_interval_ms / 1000)
        return env.get_sdk()

    def is_service_ready(self) -> bool:
        st = self._state
        now = self._clock()
        if st.last_ready_check is not None and now - st.last_ready_check < self.ready_ttl_seconds:
            return st.is_ready
        live = (
            st.is_initialized
            and self._environment is not None
            and self._environment.get_sdk() is not None
        )
        st.last_ready_check = now
        if live != st.is_ready:
            if not live:
                logger.warning("AI SDK no longer available; marking service not ready")
            self._set_ready(live)
        return live

    def _set_ready(self, ready: bool) -> None:
        st = self._state
        changed = ready != st.is_ready or st.state is ServiceState.INITIALIZING
        st.is_ready = ready
        st.last_ready_check = self._clock()
        st.state = ServiceState.READY if ready else ServiceState.UNAVAILABLE
        if changed:
            self._notify(ready)

    async def ensure_ready(self, timeout_ms: int | None = None) -> bool:
        """True once the SDK is usable; waits at most timeout_ms after initialization."""
        if self.is_service_ready():
            return True
        await self.initialize()
        if self.is_service_ready():
            return True

        timeout_ms = timeout_ms or self.default_timeout_ms
        waiter: asyncio.Future = asyncio.get_running_loop().create_future()

        def _on_change(ready: bool) -> None:
            if ready and not waiter.done():
                waiter.set_result(True)

        unsubscribe = self.on_ready(_on_change)
        try:
            return await asyncio.wait_for(waiter, timeout=timeout_ms / 1000)
        except asyncio.TimeoutError:
            logger.warning("AI service not ready after %sms", timeout_ms)
            return False
        finally:
            unsubscribe()

    def on_ready(self, callback: ReadyListener) -> Callable[[], None]:
        """Subscribe to readiness transitions; called at once if already ready."""
        token = next(self._listener_ids)
        self._listeners.append((token, callback))
        if self._state.is_ready:
            self._call_listener(callback, True)

        def unsubscribe() -> None:
            self._listeners = [(t, cb) for t, cb in self._listeners if t != token]

        return unsubscribe

    def _notify(self, ready: bool) -> None:
        for _, callback in list(self._listeners):
            self._call_listener(callback, ready)

    @staticmethod
    def _call_listener(callback: ReadyListener, ready: bool) -> None:
        try:
            callback(ready)
        except Exception:
            logger.exception("Error in AI ready listener")

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    async def make_ai_request(self, prompt: str, options: RequestOptions | None = None) -> ParsedResponse | Any:
        """Send one prompt. Returns ParsedResponse, or the raw SDK reply with raw_response=True."""
        return await self._dispatch(prompt, options, prompt)

    async def make_ai_chat(
        self, messages: list[dict[str, Any]], options: RequestOptions | None = None
    ) -> ParsedResponse | Any:
        """Send a message list ({role, content}); same contract as make_ai_request."""
        last_user = next(
            (m.get("content") for m in reversed(messages) if m.get("role") == "user"),
            "",
        )
        return await self._dispatch(messages, options, str(last_user or ""))

    async def _dispatch(
        self,
        payload: str | list[dict[str, Any]],
        options: RequestOptions | None,
        canned_source: str,
    ) -> ParsedResponse | Any:
        opts = options or RequestOptions()
        if not await self.ensure_ready(opts.timeout_ms or self.default_timeout_ms):
            raise ServiceUnavailableError("AI service is not ready")
        sdk = self._environment.get_sdk() if self._environment is not None else None
        if sdk is None:
            raise ServiceUnavailableError("AI SDK is not loaded")

        model = opts.model or self.model
        api_options: dict[str, Any] = {
            "model": model,
            "stream": opts.stream,
            "temperature": opts.temperature if opts.temperature is not None else self.default_temperature,
        }
        if opts.max_tokens is not None:
            api_options["max_tokens"] = opts.max_tokens

        try:
            raw = await sdk.chat(payload, api_options)
        except Exception as e:
            if is_auth_failure(e):
                logger.warning("AI request failed authentication (%s); using canned reply", e)
                return ParsedResponse(
                    text=get_canned_reply(canned_source),
                    raw=None,
                    model=model,
                    cached=True,
                )
            logger.error("AI request failed: %s", e)
            raise

        if opts.raw_response:
            return raw
        return ParsedResponse(text=extract_text_from_response(raw), raw=raw, model=model)


def build_ai_service(settings: Settings | None = None) -> AIService:
    s = settings or get_settings()
    return AIService(
        get_sdk_environment(s),
        model=s.ai_model,
        default_temperature=s.ai_default_temperature,
        max_attempts=s.ai_init_max_attempts,
        poll_interval_ms=s.ai_init_poll_interval_ms,
        ready_ttl_seconds=s.ai_ready_ttl_seconds,
        default_timeout_ms=s.ai_ready_timeout_ms,
    )
