"""Defensive text extraction from AI SDK replies of any shape."""

import logging
from typing import Any

from swenlog_ai.core import (
    NO_RESPONSE_MESSAGE,
    RESPONSE_ERROR_MESSAGE,
    UNPROCESSABLE_RESPONSE_MESSAGE,
)

logger = logging.getLogger(__name__)


def _field(obj: Any, name: str) -> Any:
    """Read a key from a mapping or an attribute from an SDK model object."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _content_text(content: Any) -> str | None:
    if not content:
        return None
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        text = " ".join(
            str(_field(item, "text") or "")
            for item in content
            if item is not None and _field(item, "type") == "text"
        ).strip()
        return text or None
    return None


def extract_text_from_response(response: Any) -> str:
    """
    Return the plain text of an AI reply.

    Resolution order: plain string, choices[0].message.content,
    message.content, content, text. Text-typed parts of list contents are
    joined with single spaces. Never raises: unknown shapes and traversal
    errors come back as apology strings.
    """
    if response is None or response == "":
        return NO_RESPONSE_MESSAGE

    try:
        if isinstance(response, str):
            return response

        choices = _field(response, "choices")
        if isinstance(choices, (list, tuple)) and choices:
            message = _field(choices[0], "message") if choices[0] is not None else None
            text = _content_text(_field(message, "content")) if message is not None else None
            if text:
                return text

        message = _field(response, "message")
        if message:
            text = _content_text(_field(message, "content"))
            if text:
                return text

        content = _field(response, "content")
        if content:
            return str(content)
        text = _field(response, "text")
        if text:
            return str(text)

        return UNPROCESSABLE_RESPONSE_MESSAGE
    except Exception:
        logger.exception("Error parsing AI response of type %s", type(response).__name__)
        return RESPONSE_ERROR_MESSAGE
