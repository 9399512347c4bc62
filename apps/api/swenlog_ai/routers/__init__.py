from .ai import router as ai_router
from .tools import router as tools_router

ROUTERS = (ai_router, tools_router)

__all__ = ["ROUTERS", "ai_router", "tools_router"]
