from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from apps/api so it works regardless of CWD
_env_file = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=_env_file, extra="ignore")

    # "development" enables AI diagnostics records for every cached action run
    environment: str = "development"

    # AI SDK (OpenAI-compatible chat endpoint); None => official OpenAI API when openai_api_key is set
    ai_api_base_url: str | None = None
    ai_api_key: str | None = None
    openai_api_key: str | None = None
    ai_model: str = "gpt-4o-mini"
    ai_default_temperature: float = 0.7
    # URL loaded once to bring the SDK up; None => {base_url}/models
    ai_sdk_url: str | None = None

    # Readiness gate
    ai_init_max_attempts: int = 50
    ai_init_poll_interval_ms: int = 100
    ai_ready_ttl_seconds: float = 10.0
    ai_ready_timeout_ms: int = 4000
    ai_request_timeout_seconds: float = 60.0
    ai_warmup_on_startup: bool = True

    # Cached AI tool results (one JSON file per cache key)
    ai_cache_dir: str = ".ai_cache"

    # CORS (comma-separated origins; * allows all)
    cors_origins: str = "*"

    # Rate limiting (per IP)
    tools_rate_limit: str = "20/minute"
    chat_rate_limit: str = "30/minute"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parsed CORS origins for middleware."""
        raw = self.cors_origins.strip()
        return ["*"] if not raw else [o.strip() for o in raw.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() in ("development", "dev", "local")


@lru_cache
def get_settings() -> Settings:
    return Settings()
