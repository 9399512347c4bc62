"""AI service error taxonomy with the stage at which resolution failed."""

from enum import Enum
from typing import Optional


class AIStage(str, Enum):
    """Stage identifiers for error reporting."""
    READY = "ready"
    PARSE = "parse"


class AIServiceError(Exception):
    """AI service error with stage context."""
    def __init__(self, stage: AIStage, message: str, cause: Optional[Exception] = None):
        self.stage = stage
        self.message = message
        self.cause = cause
        super().__init__(message)


class ServiceUnavailableError(AIServiceError):
    """The AI SDK never became ready within the allowed time."""
    def __init__(self, message: str = "AI service is not ready", cause: Optional[Exception] = None):
        super().__init__(AIStage.READY, message, cause)


class ParseFailureError(AIServiceError):
    """Neither the domain parser nor the JSON extractor produced a result."""
    def __init__(self, message: str = "Parse failure", cause: Optional[Exception] = None):
        super().__init__(AIStage.PARSE, message, cause)
