import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from swenlog_ai.core import get_settings, limiter
from swenlog_ai.routers import ROUTERS
from swenlog_ai.services.ai import (
    AIAssistant,
    DiagnosticsBus,
    JsonFileStorage,
    build_ai_service,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.ai_service = build_ai_service(settings)
    app.state.cache_storage = JsonFileStorage(settings.ai_cache_dir)
    app.state.diagnostics = DiagnosticsBus()
    app.state.assistant = AIAssistant(app.state.ai_service, app.state.cache_storage)
    if settings.is_development:
        app.state.diagnostics.subscribe(
            lambda e: logger.debug("ai diagnostics key=%s from_fallback=%s", e.key, e.from_fallback)
        )
    warmup = None
    if settings.ai_warmup_on_startup:
        # requests still wait for the SDK through ensure_ready
        warmup = asyncio.create_task(app.state.ai_service.initialize())
    yield
    if warmup is not None and not warmup.done():
        warmup.cancel()
    await app.state.ai_service.aclose()


app = FastAPI(
    title="SWENLOG AI API",
    description="AI-backed logistics tools over a readiness-gated AI chat SDK.",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in ROUTERS:
    app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}
