"""
Prompt templates for AI-backed logistics tools.

Every template asks for a single JSON reply; replies are still parsed
defensively (see services.ai.json_extract). Placeholders use double braces
and are replaced by fill_prompt.
"""

import re

PROMPT_ROUTE_OPTIMIZATION = """You are an expert logistics route optimization engine.
Return ONLY JSON matching this schema:
{
  "totalDistance": "<number km>",
  "estimatedTime": "<number hours>",
  "fuelCost": "<$number>",
  "carbonFootprint": "<number tons CO2>",
  "costSavings": "<$number>",
  "routeEfficiency": "<number %>",
  "optimizedOrder": [{"id": number, "name": string, "priority": string, "order": number, "estimatedArrival": string, "distanceFromPrevious": string}],
  "alternatives": [{"name": string, "distance": string, "time": string, "cost": string}]
}
Rules:
- Respond with valid JSON only (no markdown fencing, no commentary).
- Provide realistic but approximate metrics.
Context:
Optimization goal: {{GOAL}}
Route type: {{ROUTE_TYPE}}
Vehicle type: {{VEHICLE_TYPE}}
Stops (in input order):
{{STOPS}}"""

PROMPT_FREIGHT_QUOTE = """You are a freight rating engine.
Return ONLY JSON with this shape:
{
  "cost": "<number USD>",
  "transitTime": "<string human range>",
  "distance": <number km>,
  "surcharges": [{"name": string, "amount": "<number USD>"}],
  "carbonEmissionsKg": <number>,
  "modeRationale": string,
  "recommendations": string[]
}
Rules: JSON only, no markdown fences.
Assume realistic lane distance between origin '{{ORIGIN}}' and destination '{{DESTINATION}}'. If unknown, estimate.
Context: mode={{MODE}}, packageType={{PACKAGE_TYPE}}, weightKg={{WEIGHT_KG}}, dimensionsCm={{DIMENSIONS}}.
Consider volumetric weight for air.
Provide 2-5 concise recommendations."""

PROMPT_DOCUMENT_EXTRACTION = """You are an OCR post-processing and trade compliance extraction engine.
Extract key fields from the following document text. Respond with ONLY JSON:
{
  "documentType": string,
  "invoiceNumber": string|null,
  "bolNumber": string|null,
  "shipper": string|null,
  "consignee": string|null,
  "totalValue": string|null,
  "currency": string|null,
  "incoterms": string|null,
  "hsCodes": string[],
  "confidence": <number 0-100>,
  "warnings": string[]
}
Text:
---
{{DOCUMENT_TEXT}}
---
Rules: JSON only, no commentary."""

PROMPT_TRANSIT_TIME = """You are a transit time estimation engine.
Return ONLY JSON:
{
  "distanceKm": number,
  "minHours": number,
  "maxHours": number,
  "reliability": "High|Medium|Low",
  "factors": string[],
  "notes": string[]
}
Origin: {{ORIGIN}}
Destination: {{DESTINATION}}
Mode: {{MODE}}
CargoType: {{CARGO_TYPE}}
Consider customs, congestion, seasonality, typical lane performance. JSON only."""

PROMPT_SUPPLIER_RISK = """You are a supply chain supplier risk assessment engine.
Return ONLY JSON:
{
  "riskScore": number,
  "riskLevel": "low|medium|high|critical",
  "factors": [{"id": string, "category": string, "factor": string, "description": string, "impact": "low|medium|high|critical", "probability": "low|medium|high", "mitigation": string[]}],
  "recommendations": string[],
  "summary": string
}
Supplier: {{SUPPLIER}}
Location: {{LOCATION}}
Industry: {{INDUSTRY}}
PreSelectedRiskFactorIds: {{SELECTED_RISKS}}
Consider geopolitical, operational, financial, logistical and compliance dimensions.
Ensure JSON only with required fields."""

PROMPT_COMPLIANCE_GAP = """You are an international trade compliance analyst.
Return ONLY JSON:
{
  "overallStatus": "pass|warning|fail",
  "customsCompliance": {"status": "pass|warning|fail", "requirements": string[], "notes": string},
  "regulatoryCompliance": {"status": "pass|warning|fail", "requirements": string[], "notes": string},
  "tradeRestrictions": {"status": "pass|warning|fail", "restrictions": string[], "notes": string},
  "recommendations": string[]
}
OriginCountry: {{ORIGIN}}
DestinationCountry: {{DESTINATION}}
ProductCategory: {{PRODUCT_CATEGORY}}
DeclaredValueUSD: {{VALUE_USD}}
Respond with valid JSON only."""

PROMPT_PRICE_PREDICTION = """You are a freight rate price prediction engine.
Return ONLY JSON:
{
  "lane": string,
  "currency": "USD",
  "currentAvg": number,
  "forecastLow": number,
  "forecastHigh": number,
  "confidence": number,
  "factors": string[],
  "notes": string[]
}
Lane: {{LANE}}
Mode: {{MODE}}
Commodity: {{COMMODITY}}
HorizonWeeks: {{PERIOD_WEEKS}}
Rules: JSON only."""

PROMPT_PORT_PERFORMANCE = """You are a port performance and congestion analysis engine.
Return ONLY JSON:
{
  "congestionLevel": "Low|Moderate|High|Severe",
  "avgWaitingHours": number,
  "throughputTEU": number,
  "risks": string[],
  "recommendations": string[],
  "summary": string
}
Port: {{PORT_NAME}}
Region: {{REGION}}
Consider typical global trade patterns, seasonality. JSON only."""


_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def fill_prompt(template: str, **values: object) -> str:
    """Replace {{NAME}} placeholders with the keyword values (name upper-cased) in one pass.

    Unknown placeholders are left as they are; substituted values are never rescanned.
    """
    by_name = {name.upper(): value for name, value in values.items()}

    def _sub(match: re.Match) -> str:
        name = match.group(1)
        if name not in by_name:
            return match.group(0)
        value = by_name[name]
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(_sub, template)
