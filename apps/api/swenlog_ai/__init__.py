"""SWENLOG AI API: readiness-gated AI SDK access, reply normalization, cached AI tools."""
