"""
Tests for vision analysis: reply normalization and the HTTP analyzer.
"""

import json

import httpx
import pytest

from snaptheplant.core.errors import AnalysisError
from snaptheplant.services.analysis import (
    AttributeGuess,
    DirectIdentification,
    HttpVisionAnalyzer,
    UnconfiguredAnalyzer,
    parse_analysis_response,
)


class TestParseAnalysisResponse:
    """Test the accepted reply shapes."""

    def test_attribute_map(self):
        result = parse_analysis_response({"attributes": {"color": "yellow", "wings": "yes"}})
        assert result == AttributeGuess(attributes={"color": "yellow", "wings": "yes"})

    def test_attribute_list_with_poison_flag(self):
        result = parse_analysis_response({
            "attributes": [
                {"key": "color", "value": "yellow"},
                {"key": "legs", "value": 6},
            ],
            "isPoisonous": True,
        })

        assert isinstance(result, AttributeGuess)
        assert result.attributes == {"color": "yellow", "legs": "6"}
        assert result.is_poisonous is True

    def test_direct_identification(self):
        result = parse_analysis_response({
            "name": " Honey Bee ",
            "scientificName": "Apis mellifera",
            "isPoisonous": True,
            "toxicityWarning": "Stings hurt.",
            "keyInformation": "Pollinator.",
            "careTips": [{"title": "Habitat", "description": "Flowers."}],
        })

        assert isinstance(result, DirectIdentification)
        assert result.name == "Honey Bee"
        assert result.scientific_name == "Apis mellifera"
        assert result.is_poisonous is True
        assert result.toxicity_warning == "Stings hurt."
        assert result.care_tips[0].title == "Habitat"

    def test_warning_dropped_when_not_poisonous(self):
        result = parse_analysis_response({"name": "Rose", "isPoisonous": False, "toxicityWarning": "none"})
        assert result.toxicity_warning is None

    def test_output_wrapper(self):
        result = parse_analysis_response({"output": {"name": "Rose"}})
        assert result.name == "Rose"

    @pytest.mark.parametrize("data", [
        None,
        {},
        [],
        "Honey Bee",
        {"output": None},
        {"species": "Honey Bee"},
        {"name": ""},
        {"attributes": "yellow"},
        {"attributes": [{"key": "color"}]},
    ])
    def test_rejected_shapes(self, data):
        with pytest.raises(AnalysisError):
            parse_analysis_response(data)


class TestHttpVisionAnalyzer:
    """Test the HTTP client against a mock transport."""

    def _analyzer(self, handler, **kwargs):
        return HttpVisionAnalyzer(
            "https://vision.example.com/analyze",
            transport=httpx.MockTransport(handler),
            **kwargs,
        )

    @pytest.mark.asyncio
    async def test_posts_prompt_and_photo(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"name": "Honey Bee"})

        analyzer = self._analyzer(handler, api_key="secret")
        result = await analyzer.analyze("data:image/png;base64,AAAA", "Insect")

        assert result.name == "Honey Bee"
        assert seen["body"]["photoDataUri"] == "data:image/png;base64,AAAA"
        assert seen["body"]["category"] == "Insect"
        assert "Insect" in seen["body"]["prompt"]
        assert seen["auth"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_attributes_mode_sends_vocabulary(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"attributes": {"color": "red"}})

        result = await self._analyzer(handler, mode="attributes").analyze("data:image/png;base64,AAAA", "Insect")

        assert isinstance(result, AttributeGuess)
        assert "legs" in seen["body"]["prompt"]

    @pytest.mark.asyncio
    async def test_non_2xx_raises(self):
        analyzer = self._analyzer(lambda request: httpx.Response(503, json={"error": "busy"}))
        with pytest.raises(AnalysisError):
            await analyzer.analyze("data:image/png;base64,AAAA", "Insect")

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        analyzer = self._analyzer(lambda request: httpx.Response(200, text="not json"))
        with pytest.raises(AnalysisError):
            await analyzer.analyze("data:image/png;base64,AAAA", "Insect")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(AnalysisError):
            await self._analyzer(handler).analyze("data:image/png;base64,AAAA", "Insect")

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(AnalysisError):
            await self._analyzer(handler).analyze("data:image/png;base64,AAAA", "Insect")

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            HttpVisionAnalyzer("https://vision.example.com", mode="guess")


@pytest.mark.asyncio
async def test_unconfigured_analyzer_always_fails():
    with pytest.raises(AnalysisError):
        await UnconfiguredAnalyzer().analyze("data:image/png;base64,AAAA", "Insect")
