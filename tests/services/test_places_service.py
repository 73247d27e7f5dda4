"""
Tests for the Places Service.

These tests verify:
- Prompt building with and without a location
- Request config (Maps tool, lat/lng retrieval hint)
- End-to-end search with mocked Gemini responses
- Failure handling: every upstream problem becomes PlacesServiceError with
  the generic message

Note: These tests use mocked Gemini responses to avoid actual API calls
and ensure deterministic test behavior.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from namma_guide.agents.places.prompts import build_places_user_prompt
from namma_guide.schemas.places import GeoPoint, PlaceCategory, SearchResult
from namma_guide.services.places_service import (
    SEARCH_FAILED_MESSAGE,
    PlacesServiceError,
    build_generate_config,
    search,
)


def _mock_client(response=None, side_effect=None) -> MagicMock:
    """Gemini client whose aio.models.generate_content is awaited by the service."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=response, side_effect=side_effect)
    return client


# =============================================================================
# UNIT TESTS: Prompt Building
# =============================================================================

class TestPromptBuilding:
    """Tests for build_places_user_prompt."""

    def test_prompt_includes_query(self):
        prompt = build_places_user_prompt("cheap PG in Koramangala")
        assert "cheap PG in Koramangala" in prompt

    def test_prompt_without_location_asks_for_safe_areas(self):
        prompt = build_places_user_prompt("budget hotels", location=None)
        assert "popular, safe, well-known" in prompt
        assert "near them" not in prompt

    def test_prompt_with_location_asks_for_nearby_places(self):
        prompt = build_places_user_prompt(
            "budget hotels", location=GeoPoint(latitude=12.93, longitude=77.62)
        )
        assert "Find places near them" in prompt

    def test_prompt_requires_json_block(self):
        prompt = build_places_user_prompt("food")
        assert "```json" in prompt
        assert '"lat"' in prompt
        assert '"lng"' in prompt
        assert '"type"' in prompt

    def test_prompt_requires_attractions(self):
        prompt = build_places_user_prompt("food")
        assert "2-3 popular tourist attractions" in prompt
        assert '"attraction"' in prompt

    def test_prompt_lists_every_category(self):
        prompt = build_places_user_prompt("food")
        for category in PlaceCategory:
            assert f'"{category.value}"' in prompt


# =============================================================================
# UNIT TESTS: Request Config
# =============================================================================

class TestGenerateConfig:
    """Tests for build_generate_config."""

    def test_maps_tool_is_enabled(self):
        config = build_generate_config(None)
        assert len(config.tools) == 1
        assert config.tools[0].google_maps is not None

    def test_no_location_has_no_tool_config(self):
        config = build_generate_config(None)
        assert config.tool_config is None

    def test_location_is_passed_as_retrieval_hint(self):
        config = build_generate_config(GeoPoint(latitude=12.9352, longitude=77.6245))

        lat_lng = config.tool_config.retrieval_config.lat_lng
        assert lat_lng.latitude == pytest.approx(12.9352)
        assert lat_lng.longitude == pytest.approx(77.6245)


# =============================================================================
# INTEGRATION TESTS: Mocked Gemini API
# =============================================================================

class TestPlacesServiceIntegration:
    """Integration tests with mocked Gemini API."""

    @pytest.mark.asyncio
    async def test_successful_search_returns_prose_citations_and_places(
        self, gemini_response, grounding_chunk, koramangala_response_text
    ):
        response = gemini_response(
            koramangala_response_text,
            chunks=[grounding_chunk.maps("https://maps.google.com/?cid=1", "Zolo Stays")],
        )
        with patch("namma_guide.services.places_service._get_gemini_client") as mock_get_client:
            mock_get_client.return_value = _mock_client(response)

            result = await search("cheap PG in Koramangala", None)

        assert isinstance(result, SearchResult)
        assert "```" not in result.text
        assert result.text.startswith("Welcome to Bangalore!")
        assert len(result.places) == 4
        assert [c.title for c in result.citations] == ["Zolo Stays"]

    @pytest.mark.asyncio
    async def test_location_reaches_the_model_call(self, gemini_response):
        client = _mock_client(gemini_response("No places today."))
        with patch("namma_guide.services.places_service._get_gemini_client", return_value=client):
            await search("food", GeoPoint(latitude=12.97, longitude=77.59))

        kwargs = client.aio.models.generate_content.await_args.kwargs
        assert kwargs["config"].tool_config.retrieval_config.lat_lng.latitude == pytest.approx(12.97)
        assert "food" in kwargs["contents"]

    @pytest.mark.asyncio
    async def test_search_without_location_sends_no_tool_config(self, gemini_response):
        client = _mock_client(gemini_response("Prose only."))
        with patch("namma_guide.services.places_service._get_gemini_client", return_value=client):
            await search("cheap PG in Koramangala", None)

        kwargs = client.aio.models.generate_content.await_args.kwargs
        assert kwargs["config"].tool_config is None

    @pytest.mark.asyncio
    async def test_malformed_block_yields_no_places_but_stripped_prose(self, gemini_response):
        text = 'Great PGs nearby.\n```json\n[{"name": "Zolo", "lat": 12.9\n```'
        with patch(
            "namma_guide.services.places_service._get_gemini_client",
            return_value=_mock_client(gemini_response(text)),
        ):
            result = await search("pg", None)

        assert result.places == []
        assert result.text == "Great PGs nearby."

    @pytest.mark.asyncio
    async def test_missing_block_keeps_citations(self, gemini_response, grounding_chunk):
        response = gemini_response(
            "Try these places.",
            chunks=[grounding_chunk.web("https://example.com/pg", "PG list")],
        )
        with patch(
            "namma_guide.services.places_service._get_gemini_client",
            return_value=_mock_client(response),
        ):
            result = await search("pg", None)

        assert result.places == []
        assert result.text == "Try these places."
        assert len(result.citations) == 1

    @pytest.mark.asyncio
    async def test_multiple_text_parts_are_joined(self, gemini_response):
        response = gemini_response("ignored")
        response.candidates[0].content.parts = [
            MagicMock(text="Part one. "),
            MagicMock(text='```json\n[{"name": "A", "lat": 12.9, "lng": 77.6}]\n```'),
        ]
        with patch(
            "namma_guide.services.places_service._get_gemini_client",
            return_value=_mock_client(response),
        ):
            result = await search("pg", None)

        assert result.text == "Part one."
        assert [p.name for p in result.places] == ["A"]

    @pytest.mark.asyncio
    async def test_empty_parts_fall_back_to_response_text(self, gemini_response):
        response = gemini_response(None)
        response.text = "Fallback prose."
        with patch(
            "namma_guide.services.places_service._get_gemini_client",
            return_value=_mock_client(response),
        ):
            result = await search("pg", None)

        assert result.text == "Fallback prose."

    @pytest.mark.asyncio
    async def test_client_not_configured_raises_generic_error(self):
        with patch("namma_guide.services.places_service._get_gemini_client", return_value=None):
            with pytest.raises(PlacesServiceError) as exc_info:
                await search("pg", None)

        assert str(exc_info.value) == SEARCH_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_api_exception_is_hidden_behind_generic_error(self):
        client = _mock_client(side_effect=RuntimeError("quota exceeded for key abc123"))
        with patch("namma_guide.services.places_service._get_gemini_client", return_value=client):
            with pytest.raises(PlacesServiceError) as exc_info:
                await search("pg", None)

        assert exc_info.value.message == SEARCH_FAILED_MESSAGE
        assert "quota" not in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_response_without_candidates_raises(self):
        response = MagicMock()
        response.candidates = []
        with patch(
            "namma_guide.services.places_service._get_gemini_client",
            return_value=_mock_client(response),
        ):
            with pytest.raises(PlacesServiceError):
                await search("pg", None)
