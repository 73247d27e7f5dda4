"""
Parsing helpers for Gemini place responses.

The model returns free text that ends with a fenced JSON block of places.
Grounding citations travel separately in the response metadata. Everything in
this module is tolerant: a missing or broken block, or a malformed record,
degrades to fewer places and never raises.
"""

import json
import logging
import math
import re
from typing import Any, List, Optional

from namma_guide.schemas.places import Citation, Place, PlaceBlockParse, PlaceCategory

logger = logging.getLogger(__name__)

# First ```json ... ``` block, non-greedy so trailing code fences are left alone
PLACE_BLOCK_PATTERN = re.compile(r"```json\s*([\s\S]*?)\s*```")

DEFAULT_MAPS_CITATION_TITLE = "View on Google Maps"
DEFAULT_WEB_CITATION_TITLE = "View Website"


def find_place_block(text: str) -> Optional[re.Match]:
    """Locate the first structured block in the model output."""
    if not text:
        return None
    return PLACE_BLOCK_PATTERN.search(text)


def strip_place_block(text: str) -> str:
    """
    Remove the first structured block from the prose, parsed or not.

    The same match as find_place_block is used, so whatever the parser looked
    at is exactly what disappears from the display text.
    """
    match = find_place_block(text)
    if match is None:
        return (text or "").strip()
    return (text[:match.start()] + text[match.end():]).strip()


def _coerce_coordinate(value: Any) -> Optional[float]:
    """Accept ints, floats and numeric strings. Everything else is no coordinate."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _record_to_place(record: Any) -> Optional[Place]:
    """Validate one raw record. Returns None when it can't be used."""
    if not isinstance(record, dict):
        return None

    name = record.get("name")
    if not isinstance(name, str) or not name.strip():
        return None

    description = record.get("description")
    if not isinstance(description, str):
        description = ""

    return Place(
        name=name.strip(),
        lat=_coerce_coordinate(record.get("lat")),
        lng=_coerce_coordinate(record.get("lng")),
        category=PlaceCategory.from_raw(record.get("type")),
        description=description.strip(),
    )


def parse_place_block(text: str) -> PlaceBlockParse:
    """
    Parse the structured place block out of the model's narrative.

    Returns:
        PlaceBlockParse with status success / partial / failure.
        Never raises.
    """
    match = find_place_block(text)
    if match is None:
        logger.info("No structured place block in model response")
        return PlaceBlockParse(status="failure", failure_reason="missing_block")

    try:
        decoded = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse map places JSON: {e}")
        return PlaceBlockParse(status="failure", failure_reason="malformed_json")

    if not isinstance(decoded, list):
        logger.error(f"Structured place block is a {type(decoded).__name__}, expected a list")
        return PlaceBlockParse(status="failure", failure_reason="not_an_array")

    places: List[Place] = []
    rejected = 0
    for record in decoded:
        place = _record_to_place(record)
        if place is None:
            rejected += 1
            continue
        places.append(place)

    if rejected:
        logger.warning(f"Rejected {rejected} of {len(decoded)} place records")

    return PlaceBlockParse(
        status="partial" if rejected else "success",
        places=places,
        rejected_count=rejected,
    )


def _chunk_to_citation(chunk: Any) -> Optional[Citation]:
    maps = getattr(chunk, "maps", None)
    if maps is not None and getattr(maps, "uri", None):
        return Citation(
            title=getattr(maps, "title", None) or DEFAULT_MAPS_CITATION_TITLE,
            uri=maps.uri,
        )

    web = getattr(chunk, "web", None)
    if web is not None and getattr(web, "uri", None):
        return Citation(
            title=getattr(web, "title", None) or DEFAULT_WEB_CITATION_TITLE,
            uri=web.uri,
        )

    return None


def extract_citations(response: Any) -> List[Citation]:
    """
    Extract grounding citations from a Gemini response.

    Only chunks exposing a usable link are kept; upstream order is preserved.
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return []

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) if metadata else None
    if not chunks:
        return []

    citations: List[Citation] = []
    for chunk in chunks:
        citation = _chunk_to_citation(chunk)
        if citation is not None:
            citations.append(citation)
    return citations
