"""
Place Recommendation - Maps-Grounded LLM

This package contains the prompt templates and response parsing for the
Gemini-based place recommendation flow.

Architecture:
- Pattern: Grounded LLM (single API call with the Google Maps tool)
- Model: Gemini 2.5 Flash
- Output: narrative prose + fenced JSON block of places, parsed from text

The service layer is in:
- namma_guide/services/places_service.py
"""

from namma_guide.agents.places.parsing import (
    extract_citations,
    parse_place_block,
    strip_place_block,
)
from namma_guide.agents.places.prompts import (
    PLACES_SYSTEM_PROMPT,
    build_places_user_prompt,
)

__all__ = [
    "PLACES_SYSTEM_PROMPT",
    "build_places_user_prompt",
    "extract_citations",
    "parse_place_block",
    "strip_place_block",
]
