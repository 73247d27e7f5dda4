"""
Places Service - Gemini with Google Maps Grounding

This service turns a free-text query ("cheap PG in Koramangala") into a
SearchResult using Google's Gemini model with the Google Maps grounding tool.

Architecture:
- Pattern: Grounded LLM (single API call with Google Maps tool)
- Model: Gemini 2.5 Flash (configurable)
- API: Google Gen AI Python SDK (google-genai), async client
- Location: optional lat/lng passed as retrieval_config of the Maps tool
- Output: prose + fenced JSON block, parsed from text

IMPORTANT: The Maps grounding tool doesn't support response_mime_type='application/json'
or response_schema. We ask for a JSON block in the prompt and parse it from the text.

Response includes:
- text: prose with the JSON block removed
- citations: grounding chunks that carry a link
- places: structured places from the JSON block (may be empty)
"""

import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from namma_guide.agents.places.parsing import (
    extract_citations,
    parse_place_block,
    strip_place_block,
)
from namma_guide.agents.places.prompts import (
    PLACES_SYSTEM_PROMPT,
    build_places_user_prompt,
)
from namma_guide.config import settings
from namma_guide.schemas.places import GeoPoint, SearchResult
from namma_guide.utils.logging import truncate_query

logger = logging.getLogger(__name__)

# The only message callers ever see for an upstream failure
SEARCH_FAILED_MESSAGE = "Failed to fetch recommendations. Please try again."

# Initialize Gemini client (lazy initialization)
_gemini_client = None


class PlacesServiceError(Exception):
    """Upstream AI call failed or returned an unusable response."""

    def __init__(self, message: str = SEARCH_FAILED_MESSAGE):
        super().__init__(message)
        self.message = message


def _get_gemini_client():
    """
    Lazy initialization of Gemini client.
    Uses the Google Gen AI SDK.
    """
    global _gemini_client

    if _gemini_client is not None:
        return _gemini_client

    api_key = settings.GEMINI_API_KEY

    if not api_key:
        logger.warning(
            "GEMINI_API_KEY not configured. Places service will not work. "
            "Please set GEMINI_API_KEY in your .env file."
        )
        return None

    try:
        _gemini_client = genai.Client(api_key=api_key)
        logger.info("Gemini client initialized successfully for place search")
        return _gemini_client
    except Exception as e:
        logger.error(f"Failed to initialize Gemini client: {e}")
        return None


def build_generate_config(location: Optional[GeoPoint]) -> types.GenerateContentConfig:
    """
    Build the request config: Maps tool, plus a lat/lng hint when known.
    """
    tool_config = None
    if location is not None:
        tool_config = types.ToolConfig(
            retrieval_config=types.RetrievalConfig(
                lat_lng=types.LatLng(
                    latitude=location.latitude,
                    longitude=location.longitude,
                )
            )
        )

    return types.GenerateContentConfig(
        system_instruction=PLACES_SYSTEM_PROMPT,
        temperature=settings.GEMINI_TEMPERATURE,
        max_output_tokens=settings.GEMINI_MAX_OUTPUT_TOKENS,
        tools=[types.Tool(google_maps=types.GoogleMaps())],
        tool_config=tool_config,
    )


def _extract_response_text(response: Any) -> str:
    """
    Collect the narrative text of the first candidate.

    Grounded responses can split the prose over several parts, so all text
    parts are joined. Falls back to response.text.
    """
    candidate = response.candidates[0]
    content = getattr(candidate, "content", None)
    parts = getattr(content, "parts", None) if content else None

    if parts:
        texts = [part.text for part in parts if isinstance(getattr(part, "text", None), str)]
        if texts:
            return "".join(texts)

    fallback = getattr(response, "text", None)
    return fallback if isinstance(fallback, str) else ""


async def search(query_text: str, location: Optional[GeoPoint] = None) -> SearchResult:
    """
    Search for places matching a free-text query.

    This function:
    1. Builds the prompt (location-aware or city-wide fallback)
    2. Calls Gemini with the Google Maps tool
    3. Extracts grounding citations from response metadata
    4. Parses and strips the structured place block from the prose

    Args:
        query_text: User's natural language query
        location: Coordinates to ground the search on (optional)

    Returns:
        SearchResult with prose, citations and places

    Raises:
        PlacesServiceError: when the client is unavailable, the call fails, or
            the response has no candidates. The message is always generic.
    """
    logger.info(
        f"search called, query='{truncate_query(query_text)}', "
        f"location={'provided' if location else 'none'}"
    )

    client = _get_gemini_client()
    if client is None:
        logger.error("Gemini client not available")
        raise PlacesServiceError()

    prompt = build_places_user_prompt(query_text=query_text, location=location)
    config = build_generate_config(location)

    try:
        logger.info("Calling Gemini API with Google Maps grounding...")
        response = await client.aio.models.generate_content(
            model=settings.GEMINI_MODEL,
            contents=prompt,
            config=config,
        )
    except Exception as e:
        logger.error(f"Error calling Gemini API: {e}")
        raise PlacesServiceError() from e

    if response is None or not getattr(response, "candidates", None):
        logger.error("Empty response from Gemini API")
        raise PlacesServiceError()

    try:
        raw_text = _extract_response_text(response)
        citations = extract_citations(response)
    except Exception as e:
        logger.error(f"Malformed Gemini response: {e}")
        raise PlacesServiceError() from e

    parsed = parse_place_block(raw_text)
    text = strip_place_block(raw_text)

    logger.info(
        f"Returning {len(parsed.places)} places (parse status={parsed.status}) "
        f"and {len(citations)} citations"
    )

    return SearchResult(text=text, citations=citations, places=parsed.places)
