"""
Cached AI action: one AI-backed tool run with persistent caching and a
static fallback.

    action = CachedAIAction(service, storage, cache_key="transit-time:last",
                            build_prompt=lambda: transit_time_prompt(...))
    result = await action.run()
    result.data, result.error, result.from_fallback

The last good payload (live or fallback) is stored under the cache key and
loaded again when the next action for that key is built. Concurrent run()
calls on one instance are not guarded; callers should not trigger a run
while `loading` is true.
"""

import logging
import time
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel

from swenlog_ai.core import CACHED_ACTION_MAX_TOKENS, CACHED_ACTION_TEMPERATURE, get_settings
from swenlog_ai.data.ai_fallbacks import get_ai_fallback

from .diagnostics import DiagnosticsBus, DiagnosticsEntry
from .errors import ParseFailureError, ServiceUnavailableError
from .json_extract import extract_json
from .response_parser import extract_text_from_response
from .service import AIService, ParsedResponse, RequestOptions
from .storage import CacheStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ENVELOPE_KEYS = {"data", "from_fallback", "saved_at"}


class CacheEntry(BaseModel):
    data: Any
    from_fallback: bool = False
    saved_at: float


class ActionResult(BaseModel):
    data: Any = None
    loading: bool = False
    error: Optional[str] = None
    from_fallback: bool = False


def _reply_text(reply: Any) -> str:
    if isinstance(reply, ParsedResponse):
        return reply.text
    if isinstance(reply, str):
        return reply
    return extract_text_from_response(reply)


class CachedAIAction(Generic[T]):
    def __init__(
        self,
        service: AIService,
        storage: CacheStorage,
        cache_key: str,
        build_prompt: Callable[[], str],
        parse_shape: Optional[Callable[[str], Optional[T]]] = None,
        temperature: float = CACHED_ACTION_TEMPERATURE,
        max_tokens: int = CACHED_ACTION_MAX_TOKENS,
        ready_timeout_ms: int | None = None,
        fallback_lookup: Callable[[str], Any] = get_ai_fallback,
        diagnostics: DiagnosticsBus | None = None,
        emit_diagnostics: bool | None = None,
    ):
        self.service = service
        self.storage = storage
        self.cache_key = cache_key
        self.build_prompt = build_prompt
        self.parse_shape = parse_shape
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.ready_timeout_ms = ready_timeout_ms or get_settings().ai_ready_timeout_ms
        self.fallback_lookup = fallback_lookup
        self.diagnostics = diagnostics
        self.emit_diagnostics = (
            get_settings().is_development if emit_diagnostics is None else emit_diagnostics
        )

        self.data: Optional[T] = None
        self.loading = False
        self.error: Optional[str] = None
        self.from_fallback = False
        self._hydrate()

    @property
    def result(self) -> ActionResult:
        return ActionResult(
            data=self.data,
            loading=self.loading,
            error=self.error,
            from_fallback=self.from_fallback,
        )

    def _hydrate(self) -> None:
        read = self.storage.read(self.cache_key)
        if not read.ok:
            logger.warning("Discarding unreadable cache entry %s: %s", self.cache_key, read.error)
            return
        if read.value is None:
            return
        value = read.value
        if isinstance(value, dict) and set(value) == _ENVELOPE_KEYS:
            self.data = value["data"]
            self.from_fallback = bool(value["from_fallback"])
        else:
            # bare payload from an older writer; read as-is
            self.data = value

    def _persist(self, data: Any, from_fallback: bool) -> None:
        entry = CacheEntry(data=data, from_fallback=from_fallback, saved_at=time.time())
        try:
            self.storage.write(self.cache_key, entry.model_dump())
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not persist AI result for %s: %s", self.cache_key, e)

    def _parse(self, text: str) -> Any:
        parsed = self.parse_shape(text) if self.parse_shape is not None else None
        if parsed is None:
            parsed = extract_json(text)
        if parsed is None:
            raise ParseFailureError(f"Parse failure for {self.cache_key}")
        return parsed

    async def _resolve(self) -> Any:
        if not await self.service.ensure_ready(self.ready_timeout_ms):
            raise ServiceUnavailableError("AI service is not ready")
        prompt = self.build_prompt()
        reply = await self.service.make_ai_request(
            prompt,
            RequestOptions(
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout_ms=self.ready_timeout_ms,
            ),
        )
        return self._parse(_reply_text(reply))

    async def run(self) -> ActionResult:
        self.loading = True
        self.error = None
        self.from_fallback = False
        try:
            parsed = await self._resolve()
            self.data = parsed
            self._persist(parsed, from_fallback=False)
        except Exception as e:
            fallback = self.fallback_lookup(self.cache_key)
            if fallback is not None:
                logger.warning("AI action %s failed (%s); using fallback", self.cache_key, e)
                self.data = fallback
                self.from_fallback = True
                self._persist(fallback, from_fallback=True)
            else:
                logger.warning("AI action %s failed: %s", self.cache_key, e)
                self.error = str(e) or "Unknown error"
        finally:
            self.loading = False
        self._emit()
        return self.result

    def _emit(self) -> None:
        if not self.emit_diagnostics or self.diagnostics is None:
            return
        self.diagnostics.push(
            DiagnosticsEntry(key=self.cache_key, from_fallback=self.from_fallback)
        )
