"""Tests for provider request assembly."""
import json

import pytest

from nutricheck import config
from nutricheck.data_layer.models import (
    AnalysisMode,
    AnalysisResponse,
    DEFAULT_PROFILE,
    InlineImage,
)
from nutricheck.gateway import prompts, schemas
from nutricheck.gateway.request_builder import (
    IMAGE_ONLY_QUERY,
    AnalysisRequestBuilder,
    build_system_instruction,
    summarize_history,
)


class TestAnalysisCall:
    """Tests for the primary analysis request."""

    @pytest.fixture
    def builder(self):
        return AnalysisRequestBuilder()

    def _call(self, builder, query="banana", download_report=False, **kwargs):
        request = builder.build_analysis_request(
            query, DEFAULT_PROFILE, AnalysisMode.SINGLE_FOOD, download_report, **kwargs
        )
        return builder.build_analysis_call(request)

    def test_payload_includes_computed_metrics(self, builder):
        """Test that the user profile in the payload carries bmr, tdee and factor."""
        payload = json.loads(self._call(builder).contents)

        assert payload["food_query"] == "banana"
        assert payload["mode"] == "single_food"
        assert payload["download_report"] is False
        assert payload["user_profile"]["bmr"] == pytest.approx(1648.75)
        assert payload["user_profile"]["tdee"] == pytest.approx(2555.5625)
        assert payload["user_profile"]["activity_factor"] == 1.55
        assert payload["user_profile"]["gender"] == "male"
        assert "recent_history" not in payload

    def test_without_report(self, builder):
        """Test that no report is requested when download_report is false."""
        call = self._call(builder, download_report=False)

        assert "downloadable_report" not in call.response_schema["properties"]
        assert prompts.NO_REPORT_DIRECTIVE in call.system_instruction
        assert prompts.REPORT_INSTRUCTION not in call.system_instruction

    def test_with_report(self, builder):
        """Test that report instructions and schema are included on request."""
        call = self._call(builder, download_report=True)

        assert "downloadable_report" in call.response_schema["properties"]
        assert prompts.REPORT_INSTRUCTION in call.system_instruction
        assert prompts.NO_REPORT_DIRECTIVE not in call.system_instruction

    def test_call_settings(self, builder):
        """Test model, MIME type and temperature."""
        call = self._call(builder)
        assert call.model == config.ANALYSIS_MODEL
        assert call.response_mime_type == "application/json"
        assert call.temperature == config.TEMPERATURE
        assert call.image is None

    def test_schema_never_requests_preventive_data(self, builder):
        """Test that the primary schema leaves out the deep analysis."""
        for report in (False, True):
            properties = self._call(builder, download_report=report).response_schema["properties"]
            assert "preventive_health_data" not in properties
            assert set(schemas.PRIMARY_SECTION_NAMES) <= set(properties)

    def test_image_only_request(self, builder):
        """Test that an image with no text uses the image prompt."""
        image = InlineImage(data="aGVsbG8=", mime_type="image/png")
        call = self._call(builder, query="", image=image)

        assert json.loads(call.contents)["food_query"] == IMAGE_ONLY_QUERY
        assert call.image is image

    def test_history_included_when_supplied(self, builder, analysis_data):
        """Test that supplied history is summarized into the payload."""
        history = [AnalysisResponse.from_dict(analysis_data)]
        payload = json.loads(self._call(builder, history=history).contents)

        assert payload["recent_history"] == [
            {"food_name": "Boiled Egg", "calories_kcal": 155.0, "health_score": 82.0}
        ]


class TestSummarizeHistory:
    """Tests for the compact history view."""

    def test_skips_entries_without_food_analysis(self, analysis_data):
        entries = [AnalysisResponse(error="Food not recognized"), AnalysisResponse.from_dict(analysis_data)]
        assert [item["food_name"] for item in summarize_history(entries)] == ["Boiled Egg"]

    def test_limit(self, analysis_data):
        entries = [AnalysisResponse.from_dict(analysis_data) for _ in range(12)]
        assert len(summarize_history(entries)) == 10
        assert len(summarize_history(entries, limit=3)) == 3


class TestDeepAnalysisCall:
    """Tests for the deep analysis request."""

    def test_payload_and_settings(self, analysis_data):
        """Test payload shape, placeholder baseline and output token cap."""
        builder = AnalysisRequestBuilder()
        food = AnalysisResponse.from_dict(analysis_data).food_analysis
        call = builder.build_deep_analysis_call(food, DEFAULT_PROFILE)
        payload = json.loads(call.contents)

        assert payload["food_data"]["food_name"] == "Boiled Egg"
        assert payload["food_data"]["macronutrients"]["proteins_g"] == 13.0
        assert payload["user_profile"]["tdee"] == pytest.approx(2555.5625)
        assert payload["diet_history_summary"] == {
            "avg_daily_calories": 2000,
            "avg_daily_protein": 70,
            "avg_daily_sugar": 40,
            "avg_daily_fiber": 20,
            "avg_daily_sodium": 2300,
        }
        assert call.temperature == 0.3
        assert call.max_output_tokens == 8192
        assert call.response_schema is schemas.PREVENTIVE_HEALTH_SCHEMA
        assert call.system_instruction == prompts.DEEP_ANALYSIS_INSTRUCTION

    def test_deep_schema_requires_every_section(self):
        """Test that all thirteen sections and the disclaimer are required."""
        required = schemas.PREVENTIVE_HEALTH_SCHEMA["required"]
        assert len(required) == 14
        assert "medical_disclaimer" in required


class TestOtherCalls:
    """Tests for quick scan and speech requests."""

    def test_quick_scan_call(self):
        call = AnalysisRequestBuilder().build_quick_scan_call("mango lassi")
        assert "mango lassi" in call.contents
        assert call.model == config.QUICK_SCAN_MODEL
        assert call.response_schema is schemas.QUICK_SCAN_SCHEMA
        assert call.response_schema["required"] == []

    def test_speech_call(self):
        call = AnalysisRequestBuilder().build_speech_call("Hello")
        assert call.text == "Hello"
        assert call.voice_name == "Kore"


def test_system_instruction_variants():
    """Test that the two instruction variants differ only in the report part."""
    with_report = build_system_instruction(True)
    without_report = build_system_instruction(False)
    assert with_report.startswith(prompts.ANALYSIS_INSTRUCTION)
    assert without_report.startswith(prompts.ANALYSIS_INSTRUCTION)
    assert "do NOT generate \"downloadable_report\"" in without_report
