"""
Pytest configuration for Namma Guide tests.

Sets up test environment and global fixtures.
"""
import os
from types import SimpleNamespace
from typing import List, Optional

import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-api-key")
os.environ.setdefault("GEOLOCATION_PROVIDER", "static")


def make_gemini_response(
    text: Optional[str],
    chunks: Optional[List[SimpleNamespace]] = None,
) -> SimpleNamespace:
    """
    Build an object shaped like google.genai GenerateContentResponse.

    Only the attributes the places service reads are present.
    """
    parts = [SimpleNamespace(text=text)] if text is not None else []
    metadata = SimpleNamespace(grounding_chunks=chunks) if chunks is not None else None
    candidate = SimpleNamespace(
        content=SimpleNamespace(parts=parts),
        grounding_metadata=metadata,
    )
    return SimpleNamespace(candidates=[candidate], text=text)


def maps_chunk(uri: Optional[str], title: Optional[str] = None) -> SimpleNamespace:
    return SimpleNamespace(maps=SimpleNamespace(uri=uri, title=title), web=None)


def web_chunk(uri: Optional[str], title: Optional[str] = None) -> SimpleNamespace:
    return SimpleNamespace(maps=None, web=SimpleNamespace(uri=uri, title=title))


@pytest.fixture
def koramangala_response_text():
    """Typical model output: prose followed by the structured block."""
    return (
        "Welcome to Bangalore! Here are some affordable PGs in Koramangala.\n\n"
        "1. **Zolo Stays** - meals included, about Rs 9,000/month.\n"
        "2. **Stanza Living** - secure, close to offices.\n\n"
        "Nearby you can visit Lalbagh and Cubbon Park.\n\n"
        "```json\n"
        "[\n"
        '  {"name": "Zolo Stays", "lat": 12.9352, "lng": 77.6245, "type": "pg", "description": "Co-living PG"},\n'
        '  {"name": "Stanza Living", "lat": 12.9340, "lng": 77.6190, "type": "pg", "description": "Managed PG"},\n'
        '  {"name": "Lalbagh Botanical Garden", "lat": 12.9507, "lng": 77.5848, "type": "attraction", "description": "Historic garden"},\n'
        '  {"name": "Cubbon Park", "lat": 12.9763, "lng": 77.5929, "type": "attraction", "description": "City park"}\n'
        "]\n"
        "```"
    )


@pytest.fixture
def gemini_response():
    """Factory fixture: gemini_response(text, chunks=None)."""
    return make_gemini_response


@pytest.fixture
def grounding_chunk():
    """Factory fixtures for grounding chunks: grounding_chunk.maps(...) / grounding_chunk.web(...)."""
    return SimpleNamespace(maps=maps_chunk, web=web_chunk)
