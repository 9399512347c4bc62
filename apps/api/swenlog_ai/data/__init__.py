"""Static AI fallback data."""

from .ai_fallbacks import AI_FALLBACKS, CANNED_REPLIES, get_ai_fallback, get_canned_reply

__all__ = ["AI_FALLBACKS", "CANNED_REPLIES", "get_ai_fallback", "get_canned_reply"]
