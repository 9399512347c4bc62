import pytest
from pydantic import ValidationError

from conftest import FakeEnvironment, FakeSdk, make_service
from swenlog_ai.prompts import fill_prompt
from swenlog_ai.schemas import FreightCalculatorParams, RouteOptimizerParams
from swenlog_ai.services.ai import DiagnosticsBus, MemoryStorage
from swenlog_ai.services.tools import (
    TOOLS,
    UnknownToolError,
    build_tool_action,
    get_tool,
    parse_document_fields,
    parse_freight_quote,
    parse_route_plan,
    parse_transit_estimate,
)

FREIGHT = {
    "origin": "Oslo",
    "destination": " Rotterdam ",
    "weight_kg": 120,
    "dimensions": {"length": 1.2, "width": 0.8, "height": 1},
    "mode": "Ocean",
}


# -----------------------------------------------------------------------------
# domain parsers
# -----------------------------------------------------------------------------

def test_route_plan_sorts_stops_and_coerces_metrics():
    text = """Plan:
    {"totalDistance": "182.5 km", "estimatedTime": "4.5 hours", "routeEfficiency": "87%",
     "optimizedOrder": [{"id": 2, "order": "2"}, {"id": 1, "order": 1}, "junk"],
     "alternatives": {"name": "not a list"}}"""
    plan = parse_route_plan(text)

    assert [s["id"] for s in plan["optimizedOrder"]] == [1, 2]
    assert plan["alternatives"] == [{"name": "not a list"}]
    assert plan["totalDistanceKm"] == 182.5
    assert plan["estimatedHours"] == 4.5
    assert plan["routeEfficiencyPercent"] == 87


def test_freight_quote_normalizes_surcharges():
    quote = parse_freight_quote(
        '{"cost": "1450 USD", "surcharges": [{"name": "BAF", "amount": "120 USD"}, 7], "recommendations": "Book early"}'
    )
    assert quote["cost"] == 1450
    assert quote["surcharges"] == [{"name": "BAF", "amount": 120}]
    assert quote["recommendations"] == ["Book early"]
    assert quote["distance"] == 0


def test_document_confidence_is_clamped():
    doc = parse_document_fields('{"confidence": "140", "hsCodes": "8471.30", "warnings": null}')
    assert doc["confidence"] == 100.0
    assert doc["hsCodes"] == ["8471.30"]
    assert doc["warnings"] == []


def test_transit_estimate_orders_range():
    est = parse_transit_estimate('{"minHours": 120, "maxHours": "72", "factors": "Weather"}')
    assert (est["minHours"], est["maxHours"]) == (72, 120)
    assert est["factors"] == ["Weather"]
    assert est["notes"] == []


def test_transit_estimate_missing_max_uses_min():
    est = parse_transit_estimate('{"minHours": 48}')
    assert est["maxHours"] == 48


@pytest.mark.parametrize("parser", [parse_route_plan, parse_freight_quote, parse_document_fields, parse_transit_estimate])
def test_parsers_return_none_without_object(parser):
    assert parser("no json here") is None
    assert parser("[1, 2, 3]") is None


# -----------------------------------------------------------------------------
# registry
# -----------------------------------------------------------------------------

def test_registry_has_all_tools():
    assert set(TOOLS) == {
        "route-optimizer",
        "freight-calculator",
        "document-scanner",
        "transit-time",
        "supplier-risk",
        "compliance",
        "price-prediction",
        "port-performance",
    }


def test_unknown_tool():
    with pytest.raises(UnknownToolError):
        get_tool("teleporter")


def test_freight_cache_key_is_normalized():
    tool = get_tool("freight-calculator")
    params = FreightCalculatorParams.model_validate(FREIGHT)
    assert tool.cache_key(params) == "freight:oslo->rotterdam:ocean:120"


def test_document_cache_key_ignores_surrounding_whitespace():
    tool = get_tool("document-scanner")
    a = tool.params_model.model_validate({"text": "Invoice 42"})
    b = tool.params_model.model_validate({"text": "  Invoice 42\n"})
    assert tool.cache_key(a) == tool.cache_key(b)
    assert tool.cache_key(a).startswith("doc-scan:")


@pytest.mark.parametrize(
    "name,params,prefix",
    [
        ("supplier-risk", {"supplier": "Acme", "location": "Shenzhen"}, "supplier-risk:acme:shenzhen"),
        ("compliance", {"origin": "CN", "destination": "US", "product_category": "Toys", "value_usd": 10}, "compliance:cn->us:toys"),
        ("price-prediction", {"commodity": "Toys", "lane": "Shanghai-LA"}, "price-prediction:shanghai-la:ocean:toys"),
        ("port-performance", {"port_name": "Port of  Rotterdam"}, "port-perf:port of rotterdam"),
        ("transit-time", {"origin": "A", "destination": "B"}, "transit-time:last"),
    ],
)
def test_cache_keys_line_up_with_fallbacks(name, params, prefix):
    tool = get_tool(name)
    assert tool.cache_key(tool.params_model.model_validate(params)) == prefix


def test_route_params_need_two_stops():
    with pytest.raises(ValidationError):
        RouteOptimizerParams.model_validate({"stops": [{"id": 1}]})


def test_prompt_placeholders_are_filled():
    tool = get_tool("freight-calculator")
    prompt = tool.build_prompt(FreightCalculatorParams.model_validate(FREIGHT))
    assert "{{" not in prompt
    assert "Oslo" in prompt
    assert "1.2x0.8x1" in prompt


def test_placeholder_in_user_value_is_not_substituted_again():
    params = FreightCalculatorParams.model_validate({**FREIGHT, "origin": "{{DESTINATION}}"})
    prompt = get_tool("freight-calculator").build_prompt(params)
    assert "origin '{{DESTINATION}}' and destination ' Rotterdam '" in prompt


def test_fill_prompt_leaves_unknown_placeholders():
    assert fill_prompt("{{A}} and {{B}}", a="{{B}}") == "{{B}} and {{B}}"
    assert fill_prompt("x={{X}}", x=None) == "x="


@pytest.mark.asyncio
async def test_build_tool_action_runs_with_domain_parser():
    sdk = FakeSdk(reply='{"minHours": 30, "maxHours": 10}')
    service = make_service(FakeEnvironment(sdk=sdk, preloaded=True))
    tool = get_tool("transit-time")
    params = tool.params_model.model_validate({"origin": "Oslo", "destination": "Hamburg", "mode": "road"})
    bus = DiagnosticsBus()

    action = build_tool_action(service, MemoryStorage(), tool, params, bus)
    result = await action.run()

    assert action.cache_key == "transit-time:last"
    assert (result.data["minHours"], result.data["maxHours"]) == (10, 30)
    assert "Hamburg" in sdk.calls[0][0]
    assert [e.key for e in bus.history] == ["transit-time:last"]
