"""Logistics assistant: contextual prompt + knowledge base + generic-reply guard."""

import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from swenlog_ai.data.ai_fallbacks import get_canned_reply

from .errors import ServiceUnavailableError
from .response_parser import extract_text_from_response
from .service import AIService, ParsedResponse, RequestOptions
from .storage import CacheStorage

logger = logging.getLogger(__name__)

TRAINING_DATA_KEY = "chatbot-training-data"

DEFAULT_SYSTEM_PROMPT = (
    "You are SwenAI, a logistics and supply chain expert for SWENLOG Supply Chain Solutions. "
    "You provide professional, helpful advice about logistics, shipping, supply chain management, "
    "and related business operations."
)

_LOREM_MARKERS = (
    "lorem ipsum",
    "dolor sit amet",
    "consectetur adipiscing",
    "sed do eiusmod",
    "tempor incididunt",
    "labore et dolore",
    "magna aliqua",
)

_GENERIC_MARKERS = (
    "i'm sorry",
    "i apologize",
    "i cannot",
    "i don't know",
    "i'm not sure",
    "please try again",
    "error occurred",
)

MIN_USEFUL_REPLY_LENGTH = 50


class TrainingEntry(BaseModel):
    id: str
    question: str
    answer: str
    category: str = "general"
    keywords: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class AIAnswer(BaseModel):
    text: str
    error: Optional[str] = None


def is_generic_response(text: str) -> bool:
    """True for empty, placeholder, refusal-like or very short replies."""
    if not text:
        return True
    lower = text.lower()
    if any(marker in lower for marker in _LOREM_MARKERS):
        return True
    if any(marker in lower for marker in _GENERIC_MARKERS):
        return True
    return len(text) < MIN_USEFUL_REPLY_LENGTH


class AIAssistant:
    def __init__(self, service: AIService, storage: CacheStorage):
        self.service = service
        self.storage = storage
        self._training: list[TrainingEntry] = []
        self.refresh_training_data()

    @property
    def training_data_count(self) -> int:
        return len(self._training)

    def refresh_training_data(self) -> None:
        read = self.storage.read(TRAINING_DATA_KEY)
        if not read.ok:
            logger.error("Error loading training data: %s", read.error)
            return
        if not isinstance(read.value, list):
            self._training = []
            return
        entries = []
        for item in read.value:
            try:
                entries.append(TrainingEntry.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping invalid training entry: %s", e.errors()[:1])
        self._training = entries

    def build_prompt(self, user_prompt: str, context: str | None = None, system_prompt: str | None = None) -> str:
        prompt = system_prompt or DEFAULT_SYSTEM_PROMPT
        if context:
            prompt += f" You are currently helping with {context} management."
        if self._training:
            knowledge = "\n\n".join(
                f"Q: {e.question}\nA: {e.answer}\nCategory: {e.category}\nKeywords: {', '.join(e.keywords)}"
                for e in self._training
            )
            prompt += (
                "\n\nUse the following knowledge base to provide accurate answers when relevant:\n\n"
                + knowledge
            )
        prompt += f"\n\nUser Question: {user_prompt}\n\nPlease provide a helpful, professional response:"
        return prompt

    async def query(
        self,
        prompt: str,
        context: str | None = None,
        system_prompt: str | None = None,
        model: str | None = None,
    ) -> AIAnswer:
        """Answer a user question. Never raises; failures come back with `error` set."""
        try:
            if not await self.service.ensure_ready():
                return AIAnswer(
                    text="AI service is not available. Please refresh the page and try again.",
                    error="Service not ready",
                )
            reply = await self.service.make_ai_request(
                self.build_prompt(prompt, context, system_prompt),
                RequestOptions(temperature=0.7, max_tokens=1000, model=model),
            )
            text = reply.text if isinstance(reply, ParsedResponse) else extract_text_from_response(reply)
            if is_generic_response(text):
                logger.info("Generic AI reply replaced with canned answer")
                text = get_canned_reply(prompt)
            return AIAnswer(text=text)
        except ServiceUnavailableError as e:
            return AIAnswer(
                text="AI service is not available. Please refresh the page and try again.",
                error=e.message,
            )
        except Exception as e:
            logger.exception("AI assistant query failed")
            return AIAnswer(
                text="Sorry, there was an error processing your request. Please try again later.",
                error=str(e) or "Unknown error",
            )
