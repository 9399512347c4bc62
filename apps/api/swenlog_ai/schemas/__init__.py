"""Pydantic request/response schemas."""

from swenlog_ai.schemas.ai import (
    AssistantRequest,
    AssistantResponse,
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ServiceStatusResponse,
)
from swenlog_ai.schemas.tools import (
    ComplianceParams,
    Dimensions,
    DocumentScannerParams,
    FreightCalculatorParams,
    PortPerformanceParams,
    PricePredictionParams,
    RouteOptimizerParams,
    RouteStop,
    SupplierRiskParams,
    ToolRunResponse,
    TransitTimeParams,
)

__all__ = [
    "AssistantRequest",
    "AssistantResponse",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ServiceStatusResponse",
    "ComplianceParams",
    "Dimensions",
    "DocumentScannerParams",
    "FreightCalculatorParams",
    "PortPerformanceParams",
    "PricePredictionParams",
    "RouteOptimizerParams",
    "RouteStop",
    "SupplierRiskParams",
    "ToolRunResponse",
    "TransitTimeParams",
]
