"""
JSON extraction from free-form AI replies, plus coercion helpers for
AI-provided fields that may arrive as strings or scalars.
"""

import json
import math
import re
from typing import Any

_OPENERS = "{["
_CLOSERS = "}]"
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def _looks_bracketed(text: str) -> bool:
    return (text.startswith("{") and text.endswith("}")) or (
        text.startswith("[") and text.endswith("]")
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _try_parse(candidate: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(candidate, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return False, None


def extract_json(text: str | None) -> Any:
    """
    Return the first JSON object or array found in text, or None.

    The whole (trimmed) string is tried first. Otherwise the text is scanned
    left to right counting {/[ against }/]; every span where the depth
    returns to zero is a candidate, and the first one that parses wins.
    Brackets inside string literals are counted like any other bracket, so
    a quoted "}" can mis-delimit a span; such spans simply fail to parse.
    A stray closer before any opener drives the depth negative and no later
    span is collected. NaN and Infinity tokens are not JSON and reject the
    span they appear in.
    """
    if not text or not isinstance(text, str):
        return None
    trimmed = text.strip()
    if _looks_bracketed(trimmed):
        ok, value = _try_parse(trimmed)
        if ok:
            return value

    candidates: list[Any] = []
    depth = 0
    start = -1
    for i, ch in enumerate(text):
        if ch in _OPENERS:
            if depth == 0:
                start = i
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
            if depth == 0 and start != -1:
                span = text[start : i + 1].strip()
                if _looks_bracketed(span):
                    ok, value = _try_parse(span)
                    if ok:
                        candidates.append(value)
                start = -1

    return candidates[0] if candidates else None


def safe_number(value: Any, fallback: float = 0) -> float:
    """Coerce value to a finite number ("12.5 km" -> 12.5), else fallback."""
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        try:
            float(value)
        except OverflowError:
            return fallback
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else fallback
    if value is None:
        return fallback
    match = _LEADING_NUMBER.match(str(value).strip())
    if not match:
        return fallback
    n = float(match.group(0))
    return n if math.isfinite(n) else fallback


def coerce_array(value: Any) -> list:
    """List as-is, None -> [], anything else -> [value]."""
    if isinstance(value, list):
        return value
    if value is None:
        return []
    return [value]
