"""
LLM prompt templates for AI-backed logistics tools.

Placeholders (double-brace, replace with fill_prompt before sending):
  - route optimization: {{GOAL}}, {{ROUTE_TYPE}}, {{VEHICLE_TYPE}}, {{STOPS}}
  - freight quote:      {{ORIGIN}}, {{DESTINATION}}, {{MODE}}, {{PACKAGE_TYPE}}, {{WEIGHT_KG}}, {{DIMENSIONS}}
  - document scan:      {{DOCUMENT_TEXT}}
  - others:             see prompts.tools
"""

from .tools import (
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

__all__ = [
    "PROMPT_COMPLIANCE_GAP",
    "PROMPT_DOCUMENT_EXTRACTION",
    "PROMPT_FREIGHT_QUOTE",
    "PROMPT_PORT_PERFORMANCE",
    "PROMPT_PRICE_PREDICTION",
    "PROMPT_ROUTE_OPTIMIZATION",
    "PROMPT_SUPPLIER_RISK",
    "PROMPT_TRANSIT_TIME",
    "fill_prompt",
]
