from typing import Any, Optional

from pydantic import BaseModel, Field


class RouteStop(BaseModel):
    id: int
    name: str = ""
    priority: str = "medium"


class RouteOptimizerParams(BaseModel):
    optimization_goal: str = "balanced"
    route_type: str = "delivery"
    route_sub_type: str = "urban"
    vehicle_type: str = "van"
    stops: list[RouteStop] = Field(min_length=2)


class Dimensions(BaseModel):
    length: float = Field(gt=0)
    width: float = Field(gt=0)
    height: float = Field(gt=0)


class FreightCalculatorParams(BaseModel):
    origin: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    weight_kg: float = Field(gt=0)
    dimensions: Dimensions
    mode: str = "ocean"
    package_type: Optional[str] = None


class DocumentScannerParams(BaseModel):
    text: str = Field(min_length=1)


class TransitTimeParams(BaseModel):
    origin: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    mode: str = "ocean"
    cargo_type: Optional[str] = None


class SupplierRiskParams(BaseModel):
    supplier: str = Field(min_length=1)
    location: str = Field(min_length=1)
    industry: str = "general"
    selected_risks: list[str] = Field(default_factory=list)


class ComplianceParams(BaseModel):
    origin: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    product_category: str = Field(min_length=1)
    value_usd: float = Field(ge=0)


class PricePredictionParams(BaseModel):
    commodity: str = Field(min_length=1)
    lane: str = Field(min_length=1)
    mode: str = "ocean"
    period_weeks: int = Field(default=12, gt=0, le=52)


class PortPerformanceParams(BaseModel):
    port_name: str = Field(min_length=1)
    region: Optional[str] = None


class ToolRunResponse(BaseModel):
    """Result of POST /tools/{tool}. from_fallback => show a lower-confidence indicator."""

    tool: str
    cache_key: str
    data: Any = None
    error: Optional[str] = None
    from_fallback: bool = False
