"""
Durable key-value storage for cached AI results.

One JSON document per key. Reads return an explicit StorageReadResult so
callers decide what to do with a corrupt or unreadable entry; writes raise
OSError / TypeError and callers decide whether that matters.
"""

import hashlib
import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class StorageReadResult:
    ok: bool
    value: Any = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.ok and self.value is not None


class CacheStorage(ABC):
    @abstractmethod
    def read(self, key: str) -> StorageReadResult:
        pass

    @abstractmethod
    def write(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class MemoryStorage(CacheStorage):
    """In-process storage holding serialized JSON strings, like a browser's localStorage."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> StorageReadResult:
        raw = self._items.get(key)
        if raw is None:
            return StorageReadResult(ok=True)
        try:
            return StorageReadResult(ok=True, value=json.loads(raw))
        except ValueError as e:
            return StorageReadResult(ok=False, error=f"corrupt entry: {e}")

    def write(self, key: str, value: Any) -> None:
        self._items[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._items.pop(key, None)

    def raw(self, key: str) -> str | None:
        return self._items.get(key)


class JsonFileStorage(CacheStorage):
    """One `<key>.json` file per cache key under a directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        slug = _SAFE_KEY.sub("_", key).strip("_")[:80] or "entry"
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:12]
        return self.directory / f"{slug}-{digest}.json"

    def read(self, key: str) -> StorageReadResult:
        path = self._path(key)
        if not path.exists():
            return StorageReadResult(ok=True)
        try:
            return StorageReadResult(ok=True, value=json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError) as e:
            return StorageReadResult(ok=False, error=str(e))

    def write(self, key: str, value: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(value), encoding="utf-8")
        tmp.replace(path)

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass
