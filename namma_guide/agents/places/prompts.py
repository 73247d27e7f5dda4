"""
Place Recommendation Prompt Templates

Contains the system prompt and user prompt builder for the Places Service.

The Places Service uses Gemini with Google Maps grounding so that
recommendations refer to real, currently listed places.

Architecture:
- Pattern: Grounded LLM (single API call with Google Maps tool)
- Model: Gemini 2.5 Flash
- Location hint: passed through tool_config.retrieval_config.lat_lng
- Output: narrative prose followed by a fenced JSON block of places
  (the Maps tool doesn't support response_schema, so the block is parsed from text)
"""

from typing import Optional

from namma_guide.schemas.places import GeoPoint, PlaceCategory

# Fence markers of the structured block. parsing.py matches on the same markers.
PLACE_BLOCK_OPEN = "```json"
PLACE_BLOCK_CLOSE = "```"

CITY_NAME = "Bangalore"

PLACE_CATEGORY_CHOICES = " | ".join(f'"{category.value}"' for category in PlaceCategory)


# =============================================================================
# SYSTEM PROMPT
# =============================================================================

PLACES_SYSTEM_PROMPT = f"""You are a helpful local guide for someone visiting {CITY_NAME} for the first time.

<role>
You help newcomers find affordable, safe places to stay, eat, and explore.
You have access to Google Maps. Every place you recommend MUST be a real place
you found through Google Maps. Never invent places or coordinates.
</role>

<tone>
Keep the tone welcoming and informative. Prefer practical details (cost,
safety, commute) over marketing language.
</tone>"""


# =============================================================================
# USER PROMPT BUILDER
# =============================================================================

def build_places_user_prompt(query_text: str, location: Optional[GeoPoint] = None) -> str:
    """
    Build the user prompt for one place search.

    Args:
        query_text: What the user is looking for, as typed
        location: Device or map location, when known

    Returns:
        str: Prompt text ready to be sent to Gemini
    """
    if location is not None:
        location_section = (
            "The user's location is provided through the Maps tool. "
            "Find places near them."
        )
    else:
        location_section = (
            "The user's location is unknown. Suggest popular, safe, well-known "
            f"areas of {CITY_NAME} that work well for newcomers."
        )

    return f"""The user is looking for: {query_text}

<location>
{location_section}
</location>

<instructions>
1. Provide a list of specific places with a brief description, why each is good
   for a newcomer, and an estimated cost if possible.
2. In addition to the requested places, you MUST also suggest 2-3 popular tourist
   attractions or points of interest near the recommended locations.
   Tag them with type "attraction".
3. Keep the tone welcoming and informative.
</instructions>

<output_format>
CRITICAL: At the very end of your response, you MUST include a JSON block enclosed
in {PLACE_BLOCK_OPEN} and {PLACE_BLOCK_CLOSE} containing an array of ALL the specific places
you recommended (both the primary places and the nearby attractions).
Include their approximate latitude and longitude in {CITY_NAME}.

Format:
{PLACE_BLOCK_OPEN}
[
  {{
    "name": "Name of place",
    "lat": 12.9716,
    "lng": 77.5946,
    "type": {PLACE_CATEGORY_CHOICES},
    "description": "Short description"
  }}
]
{PLACE_BLOCK_CLOSE}
</output_format>"""
