"""
Predetermined AI fallbacks.

AI_FALLBACKS holds canned tool payloads used when the AI service is
unavailable or its reply cannot be parsed; keys with a dynamic suffix
resolve through their ":template" entry. CANNED_REPLIES holds plain-text
answers for chat when the SDK rejects our credentials or replies with
nothing useful.
"""

import copy
from typing import Any, Optional

AI_FALLBACKS: dict[str, Any] = {
    # Supply chain risk assessment
    "supplier-risk:template": {
        "riskScore": 58,
        "riskLevel": "medium",
        "factors": [
            {
                "id": "capacity_buffer",
                "category": "Operational",
                "factor": "Capacity Constraints",
                "description": "Potential production slowdowns due to limited surge capacity",
                "impact": "high",
                "probability": "medium",
                "mitigation": ["Dual sourcing", "Add contractual capacity buffers"],
            },
            {
                "id": "geo_tension",
                "category": "Geopolitical",
                "factor": "Regional Policy Changes",
                "description": "Regulatory shifts may affect export timelines",
                "impact": "medium",
                "probability": "medium",
                "mitigation": ["Monitor trade advisories", "Scenario planning"],
            },
        ],
        "recommendations": [
            "Establish secondary supplier for critical SKUs",
            "Implement quarterly compliance reviews",
            "Increase inbound visibility with milestone tracking",
        ],
    },
    # Compliance checker
    "compliance:template": {
        "overallStatus": "warning",
        "customsCompliance": {
            "status": "pass",
            "requirements": ["Commercial Invoice", "Packing List", "Certificate of Origin"],
            "notes": "Base customs documents appear sufficient",
        },
        "regulatoryCompliance": {
            "status": "warning",
            "requirements": ["Safety Certification Review"],
            "notes": "Additional product-specific certification recommended",
        },
        "tradeRestrictions": {
            "status": "pass",
            "restrictions": [],
            "notes": "No critical trade restrictions detected",
        },
        "recommendations": [
            "Validate HS code classification",
            "Confirm labeling requirements for destination market",
            "Retain all origin documentation for audit",
        ],
    },
    # Port performance (generic port state)
    "port-perf:template": {
        "congestionLevel": "Moderate",
        "avgWaitingHours": 18,
        "throughputTEU": 325000,
        "risks": ["Weather delays", "Berth allocation variability"],
        "recommendations": ["Advance berth scheduling", "Diversify transshipment hubs"],
        "summary": "Port operating at moderate congestion with manageable dwell time.",
    },
    # Transit time (static key)
    "transit-time:last": {
        "distanceKm": 4500,
        "minHours": 72,
        "maxHours": 120,
        "reliability": "medium",
        "factors": ["Seasonal weather", "Customs clearance variance"],
        "notes": ["Buffer lead time by 10-15%", "Use milestone visibility"],
    },
    # General supply chain exposure
    "risk-assessment:template": {
        "overallRisk": "medium",
        "score": 62,
        "drivers": ["Demand variability", "Single-sourced component"],
        "recommendations": ["Introduce alternate supplier", "Improve forecast collaboration"],
    },
    # Price prediction engine
    "price-prediction:template": {
        "lane": "SHANGHAI -> LA",
        "currency": "USD",
        "currentAvg": 1850,
        "forecastLow": 1700,
        "forecastHigh": 2150,
        "confidence": 0.72,
        "factors": ["Equipment balance improving", "Fuel surcharge stabilization"],
        "notes": ["Expect mild upward pressure in 3-5 weeks"],
    },
}

_TEMPLATE_PREFIXES = (
    "supplier-risk:",
    "compliance:",
    "port-perf:",
    "risk-assessment:",
    "price-prediction:",
)


def get_ai_fallback(cache_key: str) -> Optional[Any]:
    """Canned payload for a cache key (exact match, then prefix template), or None."""
    if cache_key in AI_FALLBACKS:
        return copy.deepcopy(AI_FALLBACKS[cache_key])
    for prefix in _TEMPLATE_PREFIXES:
        if cache_key.startswith(prefix):
            return copy.deepcopy(AI_FALLBACKS[f"{prefix}template"])
    return None


CANNED_REPLIES: dict[str, str] = {
    "shipping": (
        "Shipping involves transporting goods from one location to another. We offer ocean freight, "
        "air freight, and ground transportation services. Each method has different advantages in "
        "terms of cost, speed, and capacity."
    ),
    "freight": (
        "Freight refers to goods transported in bulk. We provide comprehensive freight solutions "
        "including FCL (Full Container Load), LCL (Less than Container Load), and specialized cargo handling."
    ),
    "logistics": (
        "Logistics encompasses the planning, implementation, and control of the movement and storage "
        "of goods. Our services include supply chain management, warehousing, and distribution."
    ),
    "customs": (
        "Customs clearance is the process of getting goods through border controls. We handle all "
        "documentation, duties, and compliance requirements for international shipments."
    ),
    "tracking": (
        "You can track your shipment using our online tracking system. Simply enter your shipment "
        "number or booking reference to get real-time updates on your cargo's location and status."
    ),
    "insurance": (
        "Cargo insurance protects your goods during transit. We offer comprehensive coverage options "
        "and can help you choose the right policy for your specific needs."
    ),
    "quote": (
        "To get a shipping quote, please provide details about your cargo including weight, dimensions, "
        "origin, destination, and preferred shipping method. We'll provide competitive rates."
    ),
    "documentation": (
        "Proper documentation is crucial for international shipping. Required documents typically "
        "include commercial invoices, packing lists, certificates of origin, and customs declarations."
    ),
    "incoterms": (
        "Incoterms define the responsibilities of sellers and buyers in international trade. Common "
        "terms include FOB, CIF, DDP, and EXW. We can help you choose the right Incoterm for your transaction."
    ),
}

DEFAULT_CANNED_REPLY = (
    "Thank you for your question about logistics and supply chain services. SWENLOG specializes in "
    "providing comprehensive shipping solutions worldwide. Could you please provide more specific "
    "details about your inquiry so I can assist you better?"
)


def get_canned_reply(prompt: str) -> str:
    """First canned reply whose keyword appears in the prompt (table order), else the default."""
    lower = (prompt or "").lower()
    for keyword, reply in CANNED_REPLIES.items():
        if keyword in lower:
            return reply
    return DEFAULT_CANNED_REPLY
