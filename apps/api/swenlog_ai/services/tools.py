"""
AI-backed logistics tools.

Each tool is a ToolSpec: a params model, a cache key, a prompt builder and
an optional domain parser. Domain parsers turn the AI's JSON into a stable
shape (numbers coerced, list fields always lists) and return None when the
reply has no usable object, which hands over to the generic JSON extractor
inside CachedAIAction.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pydantic import BaseModel

from swenlog_ai.prompts import (
    PROMPT_COMPLIANCE_GAP,
    PROMPT_DOCUMENT_EXTRACTION,
    PROMPT_FREIGHT_QUOTE,
    PROMPT_PORT_PERFORMANCE,
    PROMPT_PRICE_PREDICTION,
    PROMPT_ROUTE_OPTIMIZATION,
    PROMPT_SUPPLIER_RISK,
    PROMPT_TRANSIT_TIME,
    fill_prompt,
)
from swenlog_ai.schemas.tools import (
    ComplianceParams,
    DocumentScannerParams,
    FreightCalculatorParams,
    PortPerformanceParams,
    PricePredictionParams,
    RouteOptimizerParams,
    SupplierRiskParams,
    TransitTimeParams,
)
from swenlog_ai.services.ai import (
    AIService,
    CacheStorage,
    CachedAIAction,
    DiagnosticsBus,
    coerce_array,
    extract_json,
    safe_number,
)

logger = logging.getLogger(__name__)


class UnknownToolError(KeyError):
    """Raised for a tool name that is not registered."""


@dataclass(frozen=True)
class ToolSpec:
    name: str
    params_model: type[BaseModel]
    cache_key: Callable[[Any], str]
    build_prompt: Callable[[Any], str]
    parse_shape: Optional[Callable[[str], Any]] = None
    max_tokens: int = 700


def _norm(value: str) -> str:
    return " ".join(value.split()).strip().lower()


def _json_object(text: str) -> Optional[dict]:
    data = extract_json(text)
    return data if isinstance(data, dict) else None


# =============================================================================
# Domain parsers
# =============================================================================

def parse_route_plan(text: str) -> Optional[dict]:
    data = _json_object(text)
    if data is None:
        return None
    stops = [s for s in coerce_array(data.get("optimizedOrder")) if isinstance(s, dict)]
    stops.sort(key=lambda s: safe_number(s.get("order"), 0))
    data["optimizedOrder"] = stops
    data["alternatives"] = [a for a in coerce_array(data.get("alternatives")) if isinstance(a, dict)]
    data["totalDistanceKm"] = safe_number(data.get("totalDistance"))
    data["estimatedHours"] = safe_number(data.get("estimatedTime"))
    data["routeEfficiencyPercent"] = safe_number(data.get("routeEfficiency"))
    return data


def parse_freight_quote(text: str) -> Optional[dict]:
    data = _json_object(text)
    if data is None:
        return None
    surcharges = []
    for item in coerce_array(data.get("surcharges")):
        if isinstance(item, dict):
            surcharges.append({"name": str(item.get("name") or ""), "amount": safe_number(item.get("amount"))})
    data["surcharges"] = surcharges
    data["cost"] = safe_number(data.get("cost"))
    data["distance"] = safe_number(data.get("distance"))
    data["carbonEmissionsKg"] = safe_number(data.get("carbonEmissionsKg"))
    data["recommendations"] = [str(r) for r in coerce_array(data.get("recommendations"))]
    return data


def parse_document_fields(text: str) -> Optional[dict]:
    data = _json_object(text)
    if data is None:
        return None
    data["hsCodes"] = [str(c) for c in coerce_array(data.get("hsCodes"))]
    data["warnings"] = [str(w) for w in coerce_array(data.get("warnings"))]
    data["confidence"] = min(100.0, max(0.0, safe_number(data.get("confidence"))))
    return data


def parse_transit_estimate(text: str) -> Optional[dict]:
    data = _json_object(text)
    if data is None:
        return None
    low = safe_number(data.get("minHours"))
    high = safe_number(data.get("maxHours"), low)
    if high < low:
        low, high = high, low
    data["minHours"] = low
    data["maxHours"] = high
    data["distanceKm"] = safe_number(data.get("distanceKm"))
    data["factors"] = coerce_array(data.get("factors"))
    data["notes"] = coerce_array(data.get("notes"))
    return data


# =============================================================================
# Registry
# =============================================================================

def _route_prompt(p: RouteOptimizerParams) -> str:
    stops = "\n".join(f"- id:{s.id} name:{s.name or 'N/A'} priority:{s.priority}" for s in p.stops)
    return fill_prompt(
        PROMPT_ROUTE_OPTIMIZATION,
        goal=p.optimization_goal,
        route_type=f"{p.route_type}/{p.route_sub_type}",
        vehicle_type=p.vehicle_type,
        stops=stops,
    )


def _freight_prompt(p: FreightCalculatorParams) -> str:
    d = p.dimensions
    return fill_prompt(
        PROMPT_FREIGHT_QUOTE,
        origin=p.origin,
        destination=p.destination,
        mode=p.mode,
        package_type=p.package_type or "standard",
        weight_kg=p.weight_kg,
        dimensions=f"{d.length:g}x{d.width:g}x{d.height:g}",
    )


TOOLS: dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            name="route-optimizer",
            params_model=RouteOptimizerParams,
            cache_key=lambda p: "route-opt:{}:{}:{}".format(
                _norm(p.optimization_goal), _norm(p.vehicle_type), ",".join(str(s.id) for s in p.stops)
            ),
            build_prompt=_route_prompt,
            parse_shape=parse_route_plan,
            max_tokens=1200,
        ),
        ToolSpec(
            name="freight-calculator",
            params_model=FreightCalculatorParams,
            cache_key=lambda p: f"freight:{_norm(p.origin)}->{_norm(p.destination)}:{_norm(p.mode)}:{p.weight_kg:g}",
            build_prompt=_freight_prompt,
            parse_shape=parse_freight_quote,
        ),
        ToolSpec(
            name="document-scanner",
            params_model=DocumentScannerParams,
            cache_key=lambda p: "doc-scan:" + hashlib.sha256(p.text.strip().encode("utf-8")).hexdigest()[:16],
            build_prompt=lambda p: fill_prompt(PROMPT_DOCUMENT_EXTRACTION, document_text=p.text.strip()),
            parse_shape=parse_document_fields,
            max_tokens=900,
        ),
        ToolSpec(
            name="transit-time",
            params_model=TransitTimeParams,
            # one slot, like the calculator's "last result"
            cache_key=lambda p: "transit-time:last",
            build_prompt=lambda p: fill_prompt(
                PROMPT_TRANSIT_TIME,
                origin=p.origin,
                destination=p.destination,
                mode=p.mode,
                cargo_type=p.cargo_type or "general",
            ),
            parse_shape=parse_transit_estimate,
        ),
        ToolSpec(
            name="supplier-risk",
            params_model=SupplierRiskParams,
            cache_key=lambda p: f"supplier-risk:{_norm(p.supplier)}:{_norm(p.location)}",
            build_prompt=lambda p: fill_prompt(
                PROMPT_SUPPLIER_RISK,
                supplier=p.supplier,
                location=p.location,
                industry=p.industry,
                selected_risks=", ".join(p.selected_risks) or "none",
            ),
        ),
        ToolSpec(
            name="compliance",
            params_model=ComplianceParams,
            cache_key=lambda p: f"compliance:{_norm(p.origin)}->{_norm(p.destination)}:{_norm(p.product_category)}",
            build_prompt=lambda p: fill_prompt(
                PROMPT_COMPLIANCE_GAP,
                origin=p.origin,
                destination=p.destination,
                product_category=p.product_category,
                value_usd=f"{p.value_usd:g}",
            ),
        ),
        ToolSpec(
            name="price-prediction",
            params_model=PricePredictionParams,
            cache_key=lambda p: f"price-prediction:{_norm(p.lane)}:{_norm(p.mode)}:{_norm(p.commodity)}",
            build_prompt=lambda p: fill_prompt(
                PROMPT_PRICE_PREDICTION,
                lane=p.lane,
                mode=p.mode,
                commodity=p.commodity,
                period_weeks=p.period_weeks,
            ),
        ),
        ToolSpec(
            name="port-performance",
            params_model=PortPerformanceParams,
            cache_key=lambda p: f"port-perf:{_norm(p.port_name)}",
            build_prompt=lambda p: fill_prompt(
                PROMPT_PORT_PERFORMANCE,
                port_name=p.port_name,
                region=p.region or "Unknown",
            ),
        ),
    )
}


def get_tool(name: str) -> ToolSpec:
    try:
        return TOOLS[name]
    except KeyError:
        raise UnknownToolError(name) from None


def build_tool_action(
    service: AIService,
    storage: CacheStorage,
    tool: ToolSpec,
    params: BaseModel,
    diagnostics: DiagnosticsBus | None = None,
) -> CachedAIAction:
    """CachedAIAction for one tool invocation; the prompt is built lazily on run()."""
    return CachedAIAction(
        service,
        storage,
        cache_key=tool.cache_key(params),
        build_prompt=lambda: tool.build_prompt(params),
        parse_shape=tool.parse_shape,
        max_tokens=tool.max_tokens,
        diagnostics=diagnostics,
    )
