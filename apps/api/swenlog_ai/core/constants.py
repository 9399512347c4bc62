"""Shared AI constants."""

DEFAULT_CHAT_MODEL = "gpt-4o-mini"

# Reply normalizer messages (callers and tests match on "did not receive a response" / "apologize")
NO_RESPONSE_MESSAGE = "I apologize, but I did not receive a response. Please try again."
UNPROCESSABLE_RESPONSE_MESSAGE = "I apologize, but I could not process the response properly."
RESPONSE_ERROR_MESSAGE = "I apologize, but there was an error processing the response."

# Error message fragments treated as an authentication/authorization failure
AUTH_FAILURE_MARKERS = ("401", "unauthorized", "authentication")

# Cached action defaults
CACHED_ACTION_TEMPERATURE = 0.2
CACHED_ACTION_MAX_TOKENS = 700
