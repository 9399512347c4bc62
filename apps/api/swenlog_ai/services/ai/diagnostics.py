"""Development diagnostics for cached AI actions (live vs fallback results)."""

import logging
import time
from collections import deque
from typing import Callable

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class DiagnosticsEntry(BaseModel):
    key: str
    from_fallback: bool
    timestamp: float = Field(default_factory=lambda: time.time() * 1000)


DiagnosticsListener = Callable[[DiagnosticsEntry], None]


class DiagnosticsBus:
    """Fan-out of diagnostics entries to listeners; keeps the most recent entries."""

    def __init__(self, history_size: int = 100):
        self._listeners: list[DiagnosticsListener] = []
        self._history: deque[DiagnosticsEntry] = deque(maxlen=history_size)

    def subscribe(self, listener: DiagnosticsListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def push(self, entry: DiagnosticsEntry) -> None:
        self._history.append(entry)
        for listener in list(self._listeners):
            try:
                listener(entry)
            except Exception:
                logger.exception("AI diagnostics listener failed for key=%s", entry.key)

    @property
    def history(self) -> list[DiagnosticsEntry]:
        return list(self._history)
